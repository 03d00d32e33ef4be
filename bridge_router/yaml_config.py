"""
基于YAML的配置加载器 - Pydantic版本
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

import aiofiles
import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from .config_models import Config
from .exceptions import ConfigurationException, ErrorCode

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_TIMEOUT = 10.0


def _replace_env_vars(obj: Any) -> Any:
    """
    递归替换配置中的环境变量占位符

    支持 ${VAR_NAME} 和带默认值的 ${VAR_NAME:default_value}
    """
    if isinstance(obj, dict):
        return {key: _replace_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_replace_env_vars(item) for item in obj]
    elif isinstance(obj, str) and obj.startswith("${") and obj.endswith("}"):
        env_var = obj[2:-1]
        default_value = None

        if ":" in env_var:
            env_var, default_value = env_var.split(":", 1)

        value = os.getenv(env_var, default_value)
        if value is None:
            logger.warning(f"环境变量 {env_var} 未设置，保留占位符")
            return obj
        return value
    else:
        return obj


def parse_config(raw_text: str, config_path: Optional[Union[str, Path]] = None) -> Config:
    """解析YAML文本并校验为Config"""
    try:
        data = yaml.safe_load(raw_text) or {}
    except yaml.YAMLError as e:
        raise ConfigurationException(
            ErrorCode.CONFIG_PARSE_ERROR,
            f"配置文件格式错误: {e}",
            config_path=config_path,
            cause=e,
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationException(
            ErrorCode.CONFIG_INVALID,
            "配置文件顶层必须是映射",
            config_path=config_path,
        )

    try:
        return Config.model_validate(_replace_env_vars(data))
    except ValidationError as e:
        raise ConfigurationException(
            ErrorCode.CONFIG_INVALID,
            f"配置校验失败: {e}",
            config_path=config_path,
            cause=e,
        ) from e


def load_config(config_path: Optional[Union[str, Path]] = None) -> Config:
    """
    加载配置文件

    Args:
        config_path: 配置文件路径，为空时返回默认配置（内置Provider）

    Returns:
        校验后的Config
    """
    load_dotenv()

    if config_path is None:
        logger.info("未指定配置文件，使用默认配置")
        return Config()

    path = Path(config_path)
    try:
        raw_text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigurationException(
            ErrorCode.CONFIG_LOAD_FAILED,
            f"配置文件未找到: {path}",
            config_path=path,
            cause=e,
        ) from e

    config = parse_config(raw_text, path)
    logger.info(f"Config loaded: {len(config.providers)} providers from {path}")
    return config


async def load_config_async(
    config_path: Union[str, Path], timeout: float = DEFAULT_CONFIG_TIMEOUT
) -> Config:
    """
    异步加载配置文件，带超时

    Args:
        config_path: 配置文件路径
        timeout: 读取超时(秒)
    """
    load_dotenv()
    path = Path(config_path)

    async def _read() -> str:
        async with aiofiles.open(path, encoding="utf-8") as f:
            return await f.read()

    try:
        raw_text = await asyncio.wait_for(_read(), timeout=timeout)
    except FileNotFoundError as e:
        raise ConfigurationException(
            ErrorCode.CONFIG_LOAD_FAILED,
            f"配置文件未找到: {path}",
            config_path=path,
            cause=e,
        ) from e
    except asyncio.TimeoutError as e:
        raise ConfigurationException(
            ErrorCode.CONFIG_LOAD_FAILED,
            f"配置加载超时 ({timeout}s)",
            config_path=path,
            cause=e,
        ) from e

    config = parse_config(raw_text, path)
    logger.info(f"异步配置加载完成: {len(config.providers)} providers")
    return config
