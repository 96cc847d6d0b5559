"""Logging Configuration with pretty formatting for aigraph."""

import logging
from typing import Optional, Dict, Any
from enum import Enum, IntEnum
from datetime import datetime
from pydantic import BaseModel, Field

# ANSI Color Codes
class Colors:
    """ANSI color codes for pretty terminal output."""
    HEADER = '\033[95m'      # Pink
    INFO = '\033[94m'        # Blue
    SUCCESS = '\033[92m'     # Green
    WARNING = '\033[93m'     # Yellow
    ERROR = '\033[91m'       # Red
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

PRETTY_FORMAT = (
    "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
)

DETAILED_FORMAT = (
    f"{Colors.DIM}%(asctime)s{Colors.RESET} │ "
    f"%(colored_level)-40s │ "
    f"%(message)s"
)

class PrettyFormatter(logging.Formatter):
    """Formatter that prefixes the level name with a color and symbol."""

    level_colors = {
        'DEBUG': (Colors.DIM, '🔍'),
        'VERBOSE': (Colors.DIM, '·'),
        'INFO': (Colors.INFO, 'ℹ️'),
        'WARNING': (Colors.WARNING, '⚠️'),
        'ERROR': (Colors.ERROR, '❌'),
        'CRITICAL': (Colors.ERROR + Colors.BOLD, '🚨'),
        'AGENT': (Colors.SUCCESS, '🤖'),
        'TOOL': (Colors.HEADER, '🔧')
    }

    def format(self, record):
        color, symbol = self.level_colors.get(record.levelname, (Colors.RESET, '•'))
        record.colored_level = f"{color}{symbol} {record.levelname}{Colors.RESET}"

        message = super().format(record)

        # Separator line for errors and warnings
        if record.levelno >= logging.WARNING:
            message = f"{message}\n{Colors.DIM}{'─' * 80}{Colors.RESET}"

        return message

    def formatTime(self, record, datefmt=None):
        return datetime.fromtimestamp(record.created).strftime(datefmt or '%H:%M:%S')

class LogComponent(str, Enum):
    """Components that can be logged."""
    GRAPH = "aigraph.core.graph"
    NODES = "aigraph.core.graph.nodes"
    COMPILER = "aigraph.core.graph.compiler"
    EXECUTOR = "aigraph.core.graph.executor"
    AGENT = "aigraph.core.graph.nodes.llm"

class LogLevel(IntEnum):
    """Log levels mapped to logging module levels."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL
    AGENT = 25  # agent outputs
    TOOL = 26   # tool calls

class VerbosityLevel(IntEnum):
    """Custom verbosity levels for more granular control."""
    DEBUG = logging.DEBUG
    VERBOSE = 15  # between DEBUG and INFO
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

logging.addLevelName(LogLevel.AGENT, "AGENT")
logging.addLevelName(LogLevel.TOOL, "TOOL")
logging.addLevelName(VerbosityLevel.VERBOSE, "VERBOSE")

class AigraphLoggingConfig(BaseModel):
    """Per-graph logging behaviour.

    Attributes:
        show_node_transitions: Log every ``a --> b`` transition at INFO instead of VERBOSE
        show_state: Dump the state after each node at DEBUG
    """
    show_node_transitions: bool = Field(default=False)
    show_state: bool = Field(default=False)

def configure_logging(
    default_level: LogLevel = LogLevel.INFO,
    component_levels: Optional[Dict[LogComponent, int]] = None,
    pretty: bool = True,
    log_file: Optional[str] = None
) -> None:
    """Configure root logging with pretty console output and an optional file."""
    handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(
        PrettyFormatter(DETAILED_FORMAT) if pretty else logging.Formatter(PRETTY_FORMAT)
    )
    handlers.append(console_handler)

    # File output never carries colors
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(PRETTY_FORMAT))
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(int(default_level))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    if not component_levels:
        component_levels = {
            LogComponent.GRAPH: LogLevel.INFO,
            LogComponent.NODES: LogLevel.INFO,
            LogComponent.AGENT: LogLevel.AGENT,
        }

    for component, level in component_levels.items():
        logging.getLogger(component.value).setLevel(int(level))

def get_logger(component: LogComponent) -> logging.Logger:
    """Get a logger for a specific component."""
    logger = logging.getLogger(component.value)

    def log_agent(self, msg: str) -> None:
        self.log(LogLevel.AGENT, msg)

    def log_tool(self, msg: str) -> None:
        self.log(LogLevel.TOOL, msg)

    logger.agent = lambda msg: log_agent(logger, msg)
    logger.tool = lambda msg: log_tool(logger, msg)

    return logger

def log_verbose(logger: logging.Logger, message: str) -> None:
    """Log a message at VERBOSE level."""
    if logger.isEnabledFor(VerbosityLevel.VERBOSE):
        logger.log(VerbosityLevel.VERBOSE, message)

def log_state(logger: logging.Logger, state: Any, prefix: str = "") -> None:
    """Log a state value in a readable, nested format at DEBUG level."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    if isinstance(state, BaseModel):
        state = state.model_dump()
    if not isinstance(state, dict):
        logger.debug(f"{prefix}{state!r}")
        return
    for key, value in state.items():
        if isinstance(value, dict):
            logger.debug(f"{prefix}{key}:")
            log_state(logger, value, prefix + "  ")
        else:
            logger.debug(f"{prefix}{key}: {value}")
