from unittest.mock import patch

import main


def test_main_runs_uvicorn_without_printing(capsys):
    with patch("main.uvicorn.run") as mock_run:
        main.main()

    mock_run.assert_called_once()
    assert mock_run.call_args.args[0] == "app.main:app"
    assert capsys.readouterr().out == ""
