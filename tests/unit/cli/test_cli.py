"""
Unit tests for the aarbind command line.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from aarbind.build import BindResult
from aarbind.cli import build_parser, main
from aarbind.errors import ConflictError


@pytest.fixture
def android_home(monkeypatch, android_sdk):
    monkeypatch.setenv('ANDROID_HOME', str(android_sdk))
    monkeypatch.delenv('ANDROID_NDK_HOME', raising=False)
    return android_sdk


class TestParser:
    """Test suite for argument parsing."""

    def test_bind_defaults(self):
        """Test default values of the bind command."""
        args = build_parser().parse_args(['bind'])

        assert args.packages == ['.']
        assert args.android_api == 15
        assert args.jobs == 1
        assert args.dry_run is False

    def test_bind_flags(self):
        """Test the short flags."""
        args = build_parser().parse_args(
            ['bind', '-o', 'x.aar', '-n', '-x', '-v', '-j', '2', '--target', 'android/arm', './a', './b']
        )

        assert args.output == Path('x.aar')
        assert args.dry_run and args.print_commands and args.verbose
        assert args.jobs == 2
        assert args.target == 'android/arm'
        assert args.packages == ['./a', './b']

    def test_no_command_prints_help(self, capsys):
        """Test that running without a command shows usage."""
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 0
        assert 'usage' in capsys.readouterr().out


class TestBindCommand:
    """Test suite for the bind command."""

    @patch('aarbind.cli.BindOrchestrator')
    @patch('aarbind.cli.PackageLoader')
    def test_success(self, mock_loader, mock_orchestrator, android_home, hello_package, capsys):
        """Test a successful bind run."""
        mock_loader.return_value.load.return_value = [hello_package]
        mock_orchestrator.return_value.bind.return_value = BindResult(
            success=True,
            aar_path=Path('hello.aar'),
            sources_path=Path('hello-sources.jar'),
            archs=['arm64-v8a'],
            build_time=1.5,
        )

        with pytest.raises(SystemExit) as exc_info:
            main(['bind', '--target', 'android/arm64', './hello'])

        assert exc_info.value.code == 0
        mock_loader.return_value.load.assert_called_once_with(['./hello'])
        config = mock_orchestrator.call_args[0][0]
        assert config.archs == ('arm64',)
        assert config.sdk_root == android_home
        out = capsys.readouterr().out
        assert 'Bind successful!' in out
        assert 'hello-sources.jar' in out

    @patch('aarbind.cli.BindOrchestrator')
    @patch('aarbind.cli.PackageLoader')
    def test_missing_android_home(self, mock_loader, mock_orchestrator, monkeypatch, capsys):
        """Test that the run fails in the configure stage without ANDROID_HOME."""
        monkeypatch.delenv('ANDROID_HOME', raising=False)

        with pytest.raises(SystemExit) as exc_info:
            main(['bind', './hello'])

        assert exc_info.value.code == 1
        assert 'Bind failed during configure stage' in capsys.readouterr().out
        mock_loader.assert_not_called()
        mock_orchestrator.assert_not_called()

    @patch('aarbind.cli.BindOrchestrator')
    @patch('aarbind.cli.PackageLoader')
    def test_invalid_target(self, mock_loader, mock_orchestrator, android_home, capsys):
        """Test that a bad target is reported as a configuration failure."""
        with pytest.raises(SystemExit) as exc_info:
            main(['bind', '--target', 'ios', './hello'])

        assert exc_info.value.code == 1
        assert 'only android targets' in capsys.readouterr().out

    @patch('aarbind.cli.BindOrchestrator')
    @patch('aarbind.cli.PackageLoader')
    def test_pipeline_error(self, mock_loader, mock_orchestrator, android_home, hello_package, capsys):
        """Test that pipeline errors exit with status 1 and name the stage."""
        mock_loader.return_value.load.return_value = [hello_package]
        mock_orchestrator.return_value.bind.side_effect = ConflictError(
            'assets/a.txt', package='example.com/b', original='example.com/a', stage='assets'
        )

        with pytest.raises(SystemExit) as exc_info:
            main(['bind', './hello'])

        assert exc_info.value.code == 1
        out = capsys.readouterr().out
        assert 'Bind failed during assets stage' in out
        assert 'asset name conflict' in out

    @patch('aarbind.cli.BindOrchestrator')
    @patch('aarbind.cli.PackageLoader')
    def test_dry_run_message(self, mock_loader, mock_orchestrator, android_home, hello_package, capsys):
        """Test the dry-run summary."""
        mock_loader.return_value.load.return_value = [hello_package]
        mock_orchestrator.return_value.bind.return_value = BindResult(
            success=True, aar_path=None, sources_path=None, archs=['x86']
        )

        with pytest.raises(SystemExit) as exc_info:
            main(['bind', '-n', './hello'])

        assert exc_info.value.code == 0
        assert mock_orchestrator.call_args[0][0].dry_run is True
        assert 'nothing was written' in capsys.readouterr().out


class TestHelp:
    """Test suite for bind help text."""

    def test_bind_help(self, capsys):
        """Test that help lists the architectures and the dry-run caveat."""
        with pytest.raises(SystemExit) as exc_info:
            main(['bind', '--help'])

        assert exc_info.value.code == 0
        out = ' '.join(capsys.readouterr().out.split())
        assert 'arm, arm64, 386, amd64' in out
        assert 'go list still runs' in out
