#!/usr/bin/env python3
"""
Smart Bridge Router 命令行入口
"""

import argparse
import asyncio
import json
import sys
from typing import Any, Optional, Sequence

from .config_models import Config
from .exceptions import BaseRouterException
from .factory import build_service
from .routing import RouteComparisonService
from .types import RankingStrategy
from .utils.logger import get_logger, setup_logging
from .yaml_config import load_config

logger = get_logger(__name__)


def _print_json(data: Any, stream=None) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2), file=stream or sys.stdout)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bridge-router", description="Smart Bridge Router - 跨链桥路由比较"
    )
    parser.add_argument("--config", help="YAML配置文件路径，缺省时使用内置Provider")
    parser.add_argument("--log-level", help="覆盖配置中的日志级别")

    subparsers = parser.add_subparsers(dest="command", required=True)

    quote = subparsers.add_parser("quote", help="获取排序后的路由报价")
    quote.add_argument("--from-chain", required=True, dest="source_chain")
    quote.add_argument("--to-chain", required=True, dest="destination_chain")
    quote.add_argument("--token", required=True, dest="source_token")
    quote.add_argument("--to-token", dest="destination_token")
    quote.add_argument("--amount", required=True)
    quote.add_argument(
        "--strategy",
        choices=[strategy.value for strategy in RankingStrategy],
        help="排序策略，缺省时使用配置中的default_strategy",
    )
    quote.add_argument("--slippage-tolerance", type=float)
    quote.add_argument("--provider", help="只输出指定Provider的路由详情")

    subparsers.add_parser("providers", help="列出已注册的Provider")
    return parser


async def _run_quote(service: RouteComparisonService, args: argparse.Namespace) -> Any:
    request = {
        "source_chain": args.source_chain,
        "destination_chain": args.destination_chain,
        "source_token": args.source_token,
        "destination_token": args.destination_token,
        "amount": args.amount,
        "slippage_tolerance": args.slippage_tolerance,
        "ranking_strategy": args.strategy,
    }
    if args.provider:
        route = await service.get_route_details(request, args.provider)
        return route.to_dict()
    response = await service.get_quotes(request)
    return response.to_dict()


async def _run(config: Config, args: argparse.Namespace) -> Any:
    service = build_service(config)
    try:
        if args.command == "providers":
            return service.get_supported_providers()
        return await _run_quote(service, args)
    finally:
        await service.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """主函数"""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except BaseRouterException as e:
        _print_json(e.to_dict(), sys.stderr)
        return 2

    log_config = config.logging_dict()
    if args.log_level:
        log_config["level"] = args.log_level
    # stdout只输出JSON结果
    setup_logging(log_config, config.logging.log_file, stream=sys.stderr)

    try:
        result = asyncio.run(_run(config, args))
    except BaseRouterException as e:
        logger.error(f"Request failed: {e}")
        _print_json(e.to_dict(), sys.stderr)
        return 1
    except ValueError as e:
        logger.error(f"Invalid request: {e}")
        return 2

    _print_json(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
