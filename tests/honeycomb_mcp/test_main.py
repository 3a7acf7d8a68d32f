import sys
from unittest.mock import Mock, patch

import honeycomb_mcp.main as main_mod
from honeycomb_mcp.config import HoneycombConfig, HoneycombEnvironment
from honeycomb_mcp.exceptions import ConfigurationError


def _settings_mock(s, keyfile=None, certfile=None):
    s.MCP_HOST = "0.0.0.0"
    s.MCP_PORT = 8085
    s.MCP_TRANSPORT_PROTOCOL = "http"
    s.PYTHON_LOG_LEVEL = "INFO"
    s.MCP_SSL_KEYFILE = keyfile
    s.MCP_SSL_CERTFILE = certfile
    s.HONEYCOMB_QUERY_MAX_ATTEMPTS = 10
    s.HONEYCOMB_QUERY_POLL_INTERVAL = 1.0


def _config():
    return HoneycombConfig(
        environments=[
            HoneycombEnvironment(name="prod", api_key="abc"),
            HoneycombEnvironment(name="eu", api_key="xyz"),
        ]
    )


@patch("honeycomb_mcp.main.load_config", return_value=_config())
@patch("honeycomb_mcp.main.validate_config")
@patch("honeycomb_mcp.main.uvicorn")
def test_main_success(mock_uvicorn, _, __):
    app = Mock()
    with patch("honeycomb_mcp.main.settings") as s, \
            patch.dict(sys.modules, {"honeycomb_mcp.api": Mock(app=app)}):
        _settings_mock(s)

        main_mod.main()

        mock_uvicorn.run.assert_called_once()
        assert mock_uvicorn.run.call_args.args[0] is app
        kwargs = mock_uvicorn.run.call_args.kwargs
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 8085
        assert "log_config" in kwargs


@patch("honeycomb_mcp.main.load_config", return_value=_config())
@patch("honeycomb_mcp.main.validate_config")
@patch("honeycomb_mcp.main.uvicorn")
def test_main_logs_environment_names(mock_uvicorn, _, __):
    with patch("honeycomb_mcp.main.settings") as s, \
            patch("honeycomb_mcp.main.logger") as log, \
            patch.dict(sys.modules, {"honeycomb_mcp.api": Mock()}):
        _settings_mock(s)

        main_mod.main()

        banner = log.info.call_args_list[0]
        assert banner.args[0] == "Starting Honeycomb MCP server"
        assert banner.kwargs["environments"] == ["prod", "eu"]


@patch("honeycomb_mcp.main.load_config", return_value=_config())
@patch("honeycomb_mcp.main.validate_config")
@patch("honeycomb_mcp.main.uvicorn")
def test_main_with_ssl(mock_uvicorn, _, __):
    with patch("honeycomb_mcp.main.settings") as s, \
            patch.dict(sys.modules, {"honeycomb_mcp.api": Mock()}):
        _settings_mock(s, keyfile="/tmp/k.pem", certfile="/tmp/c.pem")

        main_mod.main()

        kwargs = mock_uvicorn.run.call_args.kwargs
        assert kwargs["ssl_keyfile"] == "/tmp/k.pem"
        assert kwargs["ssl_certfile"] == "/tmp/c.pem"


@patch("honeycomb_mcp.main.validate_config")
@patch("honeycomb_mcp.main.handle_startup_error")
@patch("honeycomb_mcp.main.uvicorn")
def test_missing_environments_stop_startup(mock_uvicorn, mock_handle_err, _):
    error = ConfigurationError("No Honeycomb configuration found", config_key="HONEYCOMB_API_KEY")
    with patch("honeycomb_mcp.main.load_config", side_effect=error):
        main_mod.main()

    mock_handle_err.assert_called_with(error, "server startup")
    mock_uvicorn.run.assert_not_called()


@patch("honeycomb_mcp.main.main", side_effect=KeyboardInterrupt())
@patch("honeycomb_mcp.main.sys")
def test_run_keyboard_interrupt(mock_sys, _):
    main_mod.run()
    mock_sys.exit.assert_called_with(0)


def test_handle_startup_error_paths():
    with patch("honeycomb_mcp.main.logger"), patch("honeycomb_mcp.main.sys") as sy:
        for err, code in [
            (ValueError("v"), 1),
            (ConfigurationError("c", config_key="HONEYCOMB_CONFIG_PATH"), 1),
            (PermissionError("p"), 1),
            (ConnectionError("c"), 1),
            (KeyboardInterrupt(), 0),
        ]:
            main_mod.handle_startup_error(err, "ctx")
            sy.exit.assert_called_with(code)

        main_mod.handle_startup_error(Exception("g"), "ctx")
        sy.exit.assert_called_with(1)


@patch("honeycomb_mcp.main.validate_config")
@patch("honeycomb_mcp.main.handle_startup_error")
def test_main_exception_handling(mock_handle_err, mock_validate):
    error = Exception("boom")
    mock_validate.side_effect = error
    main_mod.main()
    mock_handle_err.assert_called_with(error, "server startup")
