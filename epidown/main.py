"""
EpiDown Application Entry Point.

Runs a single episode search, a one-shot backlog search, library
management commands, or the long-running server mode with the search queue
and the scheduled backlog search.
"""

import argparse
import logging
import os
import sys
import time
from datetime import date, datetime, timedelta

import schedule

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> str:
    """
    配置日志：带日期的日志文件 + UTF-8 标准输出。

    Returns:
        日志文件路径
    """
    log_path = os.getenv('LOG_PATH', 'logs')
    os.makedirs(log_path, exist_ok=True)

    today = datetime.now().strftime('%Y-%m-%d')
    log_file = os.path.join(log_path, f'epidown_{today}.log')

    # 修复 Windows 控制台 UTF-8 编码问题
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setStream(open(sys.stdout.fileno(), mode='w', encoding='utf-8', buffering=1, closefd=False))

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            stream_handler
        ]
    )
    return log_file


def init_database():
    """初始化数据库"""
    from epidown.infrastructure.database.session import db_manager

    logger.info('💾 正在初始化数据库...')
    db_manager.init_db()


def handle_search_command(args) -> int:
    """
    处理单集搜索命令。

    Returns:
        进程退出码
    """
    from epidown.container import container
    from epidown.core.domain.value_objects import SearchOutcome
    from epidown.core.exceptions import InvalidArgumentError
    from epidown.core.interfaces.notifications import ProgressNotification

    job = container.search_job()
    progress = ProgressNotification(title=f'{job.name}: {args.episode_id}')

    try:
        result = job.start(progress, args.episode_id)
    except InvalidArgumentError as e:
        logger.error(f'❌ 参数无效: {e}')
        return 2

    for message in progress.messages:
        logger.debug(f'  · {message}')

    if result.outcome == SearchOutcome.GRABBED:
        for report in result.grabbed:
            logger.info(f'✅ 已发送到下载客户端: {report}')
        return 0
    if result.outcome == SearchOutcome.NO_ACCEPTABLE_CANDIDATE:
        logger.info(f'📭 没有找到需要的发布: {result.episode}')
        return 0
    return 1


def handle_backlog_command() -> int:
    """搜索所有缺失剧集（在当前线程中执行）"""
    from epidown.container import container

    search_queue = container.search_queue()
    queued = search_queue.enqueue_missing_episodes()
    if queued == 0:
        logger.info('📭 没有缺失的剧集')
        return 0

    processed = search_queue.process_pending()
    status = search_queue.get_status()
    logger.info(
        f'✅ 缺失剧集搜索完成: 处理 {processed} 个, '
        f'失败 {status["stats"]["total_failed"]} 个'
    )
    return 0


def handle_add_series_command(args) -> int:
    """添加系列到媒体库"""
    from epidown.container import container

    episode_repo = container.episode_repo()
    parser = container.release_parser()
    series_id = episode_repo.add_series(
        title=args.title,
        clean_title=parser.normalize_title(args.title),
        search_title=args.search_title,
        monitored=not args.unmonitored,
        quality_profile=args.profile
    )
    logger.info(f'✅ 系列 ID: {series_id}')
    return 0


def handle_add_episode_command(args) -> int:
    """添加剧集到媒体库"""
    from epidown.container import container

    episode_repo = container.episode_repo()
    air_date = date.fromisoformat(args.air_date) if args.air_date else None
    episode_id = episode_repo.add_episode(
        series_id=args.series_id,
        season_number=args.season,
        episode_number=args.episode,
        title=args.title,
        air_date=air_date
    )
    logger.info(f'✅ 剧集 ID: {episode_id}')
    return 0


def run_schedule():
    """运行搜索队列和定时缺失剧集搜索（主线程阻塞）"""
    from epidown.container import container
    from epidown.core.config import config

    search_queue = container.search_queue()
    search_queue.start()

    if config.backlog.enabled:
        interval = config.backlog.interval_minutes
        logger.info(f'📋 缺失剧集搜索间隔: {interval} 分钟')

        def scheduled_backlog():
            search_queue.enqueue_missing_episodes()
            next_run = datetime.now() + timedelta(minutes=interval)
            logger.info(f"⏰ 下次缺失剧集搜索时间: {next_run.strftime('%Y-%m-%d %H:%M:%S')}")

        # 立即执行一次
        scheduled_backlog()
        schedule.every(interval).minutes.do(scheduled_backlog)
    else:
        logger.info('🔕 定时缺失剧集搜索已禁用')

    try:
        while True:
            schedule.run_pending()
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info('🛑 接收到停止信号，正在退出...')
    finally:
        schedule.clear()
        search_queue.stop()
        logger.info('✅ 已优雅关闭')


def build_parser() -> argparse.ArgumentParser:
    """构建命令行参数解析器"""
    parser = argparse.ArgumentParser(description='EpiDown - 剧集搜索下载管理器')
    parser.add_argument('--debug', action='store_true', help='启用debug日志')
    subparsers = parser.add_subparsers(dest='command', help='可用命令')

    # 单集搜索
    search_parser = subparsers.add_parser('search', help='搜索单集并发送到下载客户端')
    search_parser.add_argument('episode_id', type=int, help='剧集ID')

    # 缺失剧集搜索
    subparsers.add_parser('backlog', help='搜索所有缺失剧集')

    # 服务器模式
    subparsers.add_parser('serve', help='启动搜索队列和定时任务（默认）')

    # 添加系列
    series_parser = subparsers.add_parser('add-series', help='添加系列')
    series_parser.add_argument('title', help='系列名称')
    series_parser.add_argument('--search-title', default=None, help='搜索时使用的场景名称')
    series_parser.add_argument('--profile', default='', help='质量配置档名称')
    series_parser.add_argument('--unmonitored', action='store_true', help='不监控该系列')

    # 添加剧集
    episode_parser = subparsers.add_parser('add-episode', help='添加剧集')
    episode_parser.add_argument('series_id', type=int, help='系列ID')
    episode_parser.add_argument('season', type=int, help='季号')
    episode_parser.add_argument('episode', type=int, help='集号')
    episode_parser.add_argument('--title', default='', help='剧集标题')
    episode_parser.add_argument('--air-date', default=None, help='首播日期 (YYYY-MM-DD)')

    return parser


def main():
    """主程序入口"""
    args = build_parser().parse_args()
    log_file = setup_logging(args.debug)

    if args.debug:
        logger.info('🐛 DEBUG模式已启用')

    logger.info('🚀 EpiDown 启动中...')
    logger.info(f'📁 配置文件路径: {os.getenv("CONFIG_PATH", "config.json")}')
    logger.info(f'📝 日志文件路径: {log_file}')

    init_database()

    if args.command == 'search':
        sys.exit(handle_search_command(args))
    elif args.command == 'backlog':
        sys.exit(handle_backlog_command())
    elif args.command == 'add-series':
        sys.exit(handle_add_series_command(args))
    elif args.command == 'add-episode':
        sys.exit(handle_add_episode_command(args))

    logger.info('🎬 启动服务器模式...')
    run_schedule()


if __name__ == '__main__':
    main()
