"""
generation_options.py
Options for one generation run. Built from the command line (and environment overrides)
by proto_wrangler.py, or constructed directly by library callers and tests.
"""
import os
from typing import Any, Mapping, Optional

TRUE_VALUES = ('1', 'true', 'yes', 'on')


def env_flag(environ: Mapping[str, str], key: str, default: bool) -> bool:
    """Read a boolean override such as PW_INTERFACES=1 from the environment."""
    if key not in environ:
        return default
    return environ[key].strip().lower() in TRUE_VALUES


class GenerationOptions:
    """
    Process-wide, read-only settings for a generation run.

    Args:
        generate_interfaces: Emit a read-only interface per message and make the classes implement it
        preserve_names: Keep schema names as written instead of converting them to CamelCase
        use_tabs: Indent generated code with tabs instead of four spaces
        debug_field_ids: Emit a 'const int <Name>FieldID' per field holding its wire id
        verbose: Print debug information while building and generating
        cancel_event: Optional object with is_set(); generation stops at the next message boundary once set
    """

    def __init__(self, generate_interfaces: bool = False, preserve_names: bool = False, use_tabs: bool = False,
                 debug_field_ids: bool = False, verbose: bool = False, cancel_event: Optional[Any] = None):
        self.generate_interfaces = generate_interfaces
        self.preserve_names = preserve_names
        self.use_tabs = use_tabs
        self.debug_field_ids = debug_field_ids
        self.verbose = verbose
        self.cancel_event = cancel_event

    @property
    def indent(self) -> str:
        return '\t' if self.use_tabs else '    '

    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def debug_print(self, message: str) -> None:
        """Print a debug message if verbose mode is enabled."""
        if self.verbose:
            print(f"[DEBUG] {message}")

    @classmethod
    def from_args(cls, args, environ: Optional[Mapping[str, str]] = None) -> 'GenerationOptions':
        """
        Build options from parsed command line arguments. PW_INTERFACES, PW_USE_TABS and
        PW_VERBOSE in the environment override the corresponding flags.
        """
        if environ is None:
            environ = os.environ
        return cls(
            generate_interfaces=env_flag(environ, 'PW_INTERFACES', getattr(args, 'interfaces', False)),
            preserve_names=getattr(args, 'preserve_names', False),
            use_tabs=env_flag(environ, 'PW_USE_TABS', getattr(args, 'use_tabs', False)),
            debug_field_ids=getattr(args, 'debug_field_ids', False),
            verbose=env_flag(environ, 'PW_VERBOSE', getattr(args, 'verbose', False)),
        )
