"""FastMCP server implementation for wedding-nlq."""

from __future__ import annotations

import dotenv
from fastmcp import FastMCP
from fastmcp.utilities.logging import get_logger
from starlette.requests import Request
from starlette.responses import JSONResponse

from wedding_nlq.tools import register_report_tools

# Load environment variables
dotenv.load_dotenv()

_logger = get_logger(__name__)

mcp = FastMCP(
    name="wedding-nlq",
    instructions=(
        "Answers natural-language questions about a single wedding's guests, "
        "RSVPs, seating tables and gifts with validated, read-only SQL. "
        "Always pass the wedding_id and admin_id of the current session."
    ),
)

# -- Tool Registration -------------------------------------------------------
register_report_tools(mcp)


# -- Health Check ----------------------------------------------------------
@mcp.custom_route("/health", methods=["GET"])
async def health_check(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "healthy", "service": "wedding-nlq"})
