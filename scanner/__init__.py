"""Scanner module for definition discovery and require injection."""

from .discovery import ConfigurationError, check_root, iter_source_files, module_identifier
from .config import ProcessorConfig, load_config
from .patterns import SourcePatterns
from .guard import is_real_content
from .definitions import scan_definitions
from .usages import scan_usages
from .injector import inject_requires
from .builder import build_symbol_table, inject_all, process_app

__all__ = [
    "ConfigurationError",
    "check_root",
    "iter_source_files",
    "module_identifier",
    "ProcessorConfig",
    "load_config",
    "SourcePatterns",
    "is_real_content",
    "scan_definitions",
    "scan_usages",
    "inject_requires",
    "build_symbol_table",
    "inject_all",
    "process_app",
]
