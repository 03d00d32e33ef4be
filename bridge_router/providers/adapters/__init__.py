"""
桥接Provider适配器实现
"""

from .builtin import BUILTIN_PROVIDERS, builtin_provider_configs
from .http_bridge import HttpQuoteAdapter
from .template import TemplateQuoteAdapter

__all__ = [
    "TemplateQuoteAdapter",
    "HttpQuoteAdapter",
    "BUILTIN_PROVIDERS",
    "builtin_provider_configs",
]
