"""capability-tracker MCP server."""

from mcp.server.fastmcp import FastMCP

from .config import load_config
from .logging_config import setup_logging
from .seed import build_store
from .tools import register_all_tools

mcp = FastMCP("capability-tracker")
config = load_config()
# stdio carries the protocol, so logs go to stderr only
setup_logging(config.log_level)
store = build_store(config.seed_file, config.current_user)
register_all_tools(mcp, config, store)
