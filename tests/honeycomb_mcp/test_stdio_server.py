import os
import subprocess
import sys
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

import honeycomb_mcp.stdio_server as stdio_mod

SRC_DIR = Path(__file__).resolve().parents[2] / "src"


def _run_entrypoint(code: str, cwd: Path) -> subprocess.CompletedProcess:
    env = dict(os.environ)
    env.pop("HONEYCOMB_CONFIG_PATH", None)
    env["HONEYCOMB_API_KEY"] = "abc"
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC_DIR), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-c", code],
        cwd=cwd,
        env=env,
        stdin=subprocess.DEVNULL,
        capture_output=True,
        text=True,
        timeout=60,
    )


@pytest.mark.parametrize(
    "code",
    [
        "import honeycomb_mcp.stdio_server as m; m.main()",
        "import sys; sys.argv = ['honeycomb-mcp-server', 'stdio']; import honeycomb_mcp.cli as c; c.main()",
    ],
    ids=["stdio_server", "cli"],
)
def test_stdout_carries_no_log_lines(tmp_path, code):
    proc = _run_entrypoint(code, tmp_path)

    assert proc.stdout == ""
    assert "Using single Honeycomb environment" in proc.stderr


@patch("honeycomb_mcp.stdio_server.get_python_logger")
@patch("honeycomb_mcp.stdio_server.validate_config")
def test_runs_fastmcp_over_stdio(_, mock_get_logger):
    server = Mock()
    with patch.dict(os.environ), \
            patch("honeycomb_mcp.server.HoneycombMCPServer", return_value=server) as server_cls:
        stdio_mod.main()

    server_cls.assert_called_once_with()
    server.mcp.run.assert_called_once_with(transport="stdio", show_banner=False)
    assert mock_get_logger.call_args.kwargs["stream"] is sys.stderr


@patch("honeycomb_mcp.stdio_server.get_python_logger")
@patch("honeycomb_mcp.stdio_server.validate_config", side_effect=ValueError("HONEYCOMB_QUERY_MAX_ATTEMPTS must be at least 1, got 0"))
@patch("honeycomb_mcp.stdio_server.sys")
def test_invalid_settings_exit_before_server_starts(mock_sys, _, mock_get_logger):
    with patch.dict(os.environ), patch("honeycomb_mcp.server.HoneycombMCPServer") as server_cls:
        stdio_mod.main()

    server_cls.assert_not_called()
    mock_sys.exit.assert_called_once_with(1)
    mock_get_logger.return_value.error.assert_called_once()
