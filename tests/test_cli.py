# ==============================================
# Tests for the Command Line
# ==============================================

import pytest

from segdb.cli import EXIT_ABORTED, EXIT_FAILED, EXIT_OK, main


@pytest.fixture
def saved_session(session_store, segmented_cloud, id_matches):
    session_store.save_session(segmented_cloud, id_matches)
    return session_store.base_dir


class TestCli:

    def test_summary(self, saved_session, capsys):
        assert main(["--base-dir", saved_session, "summary"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "Segments:          2" in out
        assert "Points:            3" in out
        assert "Match groups:      2" in out

    def test_all_matches(self, saved_session, capsys):
        assert main(["--base-dir", saved_session, "matches"]) == EXIT_OK
        assert capsys.readouterr().out == "1 2 \n3 4 5 \n"

    def test_matches_of_one_segment(self, saved_session, capsys):
        assert main(["--base-dir", saved_session, "matches", "4"]) == EXIT_OK
        assert capsys.readouterr().out == "3 5\n"

    def test_segment_without_matches(self, saved_session, capsys):
        assert main(["--base-dir", saved_session, "matches", "7"]) == EXIT_OK
        assert "has no matches" in capsys.readouterr().out

    def test_centroids(self, saved_session, tmp_path):
        output = tmp_path / "out" / "centroids.csv"
        assert main(["--base-dir", saved_session, "centroids", str(output)]) == EXIT_OK
        assert len(output.read_text().splitlines()) == 2

    def test_missing_session(self, tmp_path, capsys):
        assert main(["--base-dir", str(tmp_path / "empty"), "summary"]) == EXIT_FAILED
        assert "Could not load session" in capsys.readouterr().err

    def test_feature_collision(self, saved_session, session_store):
        with open(session_store.features_file, "a") as f:
            f.write("7 c 3.0 \n")
        assert main(["--base-dir", saved_session, "--policy", "abort", "summary"]) == EXIT_ABORTED
        assert main(["--base-dir", saved_session, "--policy", "concatenate", "summary"]) == EXIT_OK

    @pytest.mark.parametrize("variable, value", [
        ("SEGDB_FEATURE_MERGE_POLICY", "bogus"),
        ("SEGDB_LOG_LEVEL", "LOUD"),
    ])
    def test_invalid_environment(self, saved_session, monkeypatch, capsys, variable, value):
        monkeypatch.setenv(variable, value)
        args = ["--base-dir", saved_session, "--policy", "concatenate", "summary"]
        assert main(args) == EXIT_FAILED
        err = capsys.readouterr().err
        assert "✗ Invalid configuration" in err
        assert value in err
