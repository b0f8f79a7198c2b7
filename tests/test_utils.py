import pytest

from smartvault.utils import retry
from smartvault.utils.file import scratch_file, workdir
from smartvault.utils.retry import with_retry
from smartvault.utils.text import clean_text, first_sentence, preview


class TestWithRetry:
    def setup_method(self):
        self.sleeps = []

    def _patch_sleep(self, monkeypatch):
        monkeypatch.setattr(retry.time, "sleep", self.sleeps.append)

    def test_retries_until_success(self, monkeypatch):
        self._patch_sleep(monkeypatch)
        attempts = iter([ValueError("a"), ValueError("b"), "ok"])

        def flaky():
            value = next(attempts)
            if isinstance(value, Exception):
                raise value
            return value

        assert with_retry(flaky, retries=3, base_delay=0.5) == "ok"
        assert self.sleeps == [0.5, 1.0]

    def test_reraises_last_error_without_final_sleep(self, monkeypatch):
        self._patch_sleep(monkeypatch)

        def always_fails():
            raise ValueError("still broken")

        with pytest.raises(ValueError, match="still broken"):
            with_retry(always_fails, retries=2, base_delay=1.0)
        assert self.sleeps == [1.0]

    def test_other_errors_not_retried(self, monkeypatch):
        self._patch_sleep(monkeypatch)
        calls = []

        def fails():
            calls.append(1)
            raise KeyError("x")

        with pytest.raises(KeyError):
            with_retry(fails, retries=3, retry_on=(ValueError,))
        assert len(calls) == 1


class TestTempFiles:
    def test_workdir_removed_after_error(self, tmp_path):
        with pytest.raises(RuntimeError):
            with workdir("job", str(tmp_path)) as tmp:
                (tmp / "partial.part").write_bytes(b"x")
                raise RuntimeError("interrupted")
        assert list(tmp_path.iterdir()) == []

    def test_scratch_file_holds_data_then_disappears(self, tmp_path):
        with scratch_file(b"abc", suffix=".m4a", root=str(tmp_path)) as path:
            assert path.read_bytes() == b"abc"
            assert path.suffix == ".m4a"
        assert not path.exists()


class TestText:
    def test_clean_text(self):
        assert clean_text("  a\n\tb  c ") == "a b c"

    def test_first_sentence(self):
        assert first_sentence("One. Two.") == "One"
        assert first_sentence("") == ""

    def test_preview(self):
        assert preview("x" * 120, limit=10) == "x" * 10 + "..."
