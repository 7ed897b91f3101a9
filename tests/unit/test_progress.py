from __future__ import annotations

from unittest.mock import MagicMock, patch

from networking_sync.services.progress import StageProgress, is_tty_enabled


def test_is_tty_enabled_follows_stdout():
    with patch("sys.stdout.isatty", return_value=True):
        assert is_tty_enabled() is True
    with patch("sys.stdout.isatty", return_value=False):
        assert is_tty_enabled() is False


def test_progress_disabled_without_tty():
    with patch("networking_sync.services.progress.is_tty_enabled", return_value=False):
        with patch("networking_sync.services.progress.tqdm") as mock_tqdm:
            with StageProgress(3) as progress:
                progress.start("fetch onboarding")
                progress.finish(rows=3)
            mock_tqdm.assert_not_called()
    assert progress.pbar is None
    assert progress.current_stage == 1


def test_progress_updates_bar_with_tty():
    bar = MagicMock()
    with patch("networking_sync.services.progress.is_tty_enabled", return_value=True):
        with patch("networking_sync.services.progress.tqdm", return_value=bar) as mock_tqdm:
            with StageProgress(5, description="Syncing") as progress:
                progress.start("merge")
                progress.finish(new=2)
    mock_tqdm.assert_called_once()
    assert mock_tqdm.call_args.kwargs["total"] == 5
    bar.set_description.assert_any_call("Syncing (merge)")
    bar.update.assert_called_once_with(1)
    bar.set_postfix.assert_called_once_with(new=2)
    bar.close.assert_called_once()
