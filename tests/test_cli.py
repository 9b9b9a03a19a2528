"""End-to-end tests for the command-line interface.

WHY: The CLI is how most users touch the pipeline. It has to write the
right files with the right names, keep earlier output intact, and fail
with exit code 1 and a readable message instead of a traceback.

HOW: Each test writes raw response blobs into tmp_path, calls main() with
an explicit argv, and inspects the files written and the captured
stdout/stderr.

RULES:
- No network; every response blob comes from conftest.py or is inline
- Status output is asserted on stderr, data output on stdout
"""

import io

import pytest

from transcript_lab.cli import build_parser, main


@pytest.fixture
def response_file(tmp_path, clean_response):
    path = tmp_path / "song.response"
    path.write_text(clean_response, encoding="utf-8")
    return path


class TestOutputs:
    """Selected formats are written next to the response file."""

    def test_selected_formats(self, response_file, tmp_path):
        main([str(response_file), "--formats", "srt,lrc"])
        assert (tmp_path / "song.srt").read_text(encoding="utf-8").startswith(
            "1\n00:00:00,000 --> 00:00:02,000\nHello there\n"
        )
        assert (tmp_path / "song.lrc").exists()
        assert not (tmp_path / "song.json").exists()

    def test_all_formats_by_default(self, response_file, tmp_path):
        main([str(response_file)])
        for suffix in (".txt", ".srt", ".lrc", ".json", ".ttml"):
            assert (tmp_path / ("song" + suffix)).exists()

    def test_duration_controls_final_clear(self, response_file, tmp_path):
        main([str(response_file), "--formats", "lrc", "--duration", "14"])
        content = (tmp_path / "song.lrc").read_text(encoding="utf-8")
        assert content.endswith("[00:10.00]General Kenobi")

    def test_output_dir(self, response_file, tmp_path):
        out = tmp_path / "out"
        out.mkdir()
        main([str(response_file), "--formats", "srt", "--output-dir", str(out)])
        assert (out / "song.srt").exists()

    def test_conflict_gets_numeric_suffix(self, response_file, tmp_path):
        main([str(response_file), "--formats", "srt"])
        main([str(response_file), "--formats", "srt"])
        main([str(response_file), "--formats", "srt"])
        assert (tmp_path / "song.srt").exists()
        assert (tmp_path / "song-2.srt").exists()
        assert (tmp_path / "song-3.srt").exists()

    def test_status_goes_to_stderr(self, response_file, capsys):
        main([str(response_file), "--formats", "srt"])
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Recovered 2 segments" in captured.err
        assert "Saved: song.srt" in captured.err

    def test_stdin(self, tmp_path, clean_response, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("sys.stdin", io.StringIO(clean_response))
        main(["-", "--formats", "plain_text"])
        assert (tmp_path / "stdin.txt").read_text(encoding="utf-8") == (
            "Hello there\n\nGeneral Kenobi"
        )

    def test_truncated_response_still_exports(self, tmp_path, truncated_response):
        path = tmp_path / "cut.response"
        path.write_text(truncated_response, encoding="utf-8")
        main([str(path), "--formats", "plain_text"])
        assert (tmp_path / "cut.txt").read_text(encoding="utf-8") == "Hi"


class TestTranslation:
    """--translation merges each lane with its own translation pass."""

    def test_translated_variant(self, response_file, tmp_path, translation_response):
        translation = tmp_path / "translation.response"
        translation.write_text(translation_response, encoding="utf-8")
        main([
            str(response_file), "--formats", "plain_text",
            "--translation", str(translation), "--variant", "translated",
        ])
        content = (tmp_path / "song_translated.txt").read_text(encoding="utf-8")
        assert content == "Halo\n\nJenderal Kenobi"

    def test_translated_without_translation_is_empty(self, response_file, tmp_path):
        main([str(response_file), "--formats", "plain_text", "--variant", "translated"])
        assert (tmp_path / "song_translated.txt").read_text(encoding="utf-8") == "\n\n"

    def test_each_lane_gets_its_own_translation(self, response_file, tmp_path,
                                                translation_response):
        other = tmp_path / "other.response"
        other.write_text(
            '[{"startTime": "00:00", "endTime": "00:12", "text": "Hello there General Kenobi"}]',
            encoding="utf-8",
        )
        song_tr = tmp_path / "song.translation"
        song_tr.write_text(translation_response, encoding="utf-8")
        other_tr = tmp_path / "other.translation"
        other_tr.write_text(
            '[{"startTime": "00:00", "endTime": "00:12", "text": "x", '
            '"translatedText": "Halo Jenderal Kenobi"}]',
            encoding="utf-8",
        )
        main([
            str(response_file), str(other), "--formats", "plain_text",
            "--translation", str(song_tr), "--translation", str(other_tr),
            "--variant", "translated",
        ])
        assert (tmp_path / "song_translated.txt").read_text(encoding="utf-8") == (
            "Halo\n\nJenderal Kenobi"
        )
        assert (tmp_path / "other_translated.txt").read_text(encoding="utf-8") == (
            "Halo Jenderal Kenobi"
        )

    def test_translation_count_must_match_inputs(self, response_file, tmp_path,
                                                 translation_response, capsys):
        other = tmp_path / "other.response"
        other.write_text(response_file.read_text(encoding="utf-8"), encoding="utf-8")
        song_tr = tmp_path / "song.translation"
        song_tr.write_text(translation_response, encoding="utf-8")
        with pytest.raises(SystemExit) as excinfo:
            main([str(response_file), str(other), "--translation", str(song_tr)])
        assert excinfo.value.code == 1
        assert "--translation was given 1 time(s) for 2 input(s)" in capsys.readouterr().err
        assert not (tmp_path / "song.srt").exists()


class TestNaming:
    """Lane labels and language tags flow into output names."""

    def test_label(self, response_file, tmp_path):
        main([str(response_file), "--formats", "srt", "--label", "f3"])
        assert (tmp_path / "song_f3.srt").exists()

    def test_label_and_language(self, response_file, tmp_path, translation_response):
        translation = tmp_path / "song.translation"
        translation.write_text(translation_response, encoding="utf-8")
        main([
            str(response_file), "--formats", "srt", "--label", "f2.5",
            "--translation", str(translation),
            "--variant", "translated", "--language", "Indonesian",
        ])
        assert (tmp_path / "song_f2.5_Indonesian.srt").exists()

    def test_language_ignored_for_original(self, response_file, tmp_path):
        main([str(response_file), "--formats", "srt", "--language", "Indonesian"])
        assert (tmp_path / "song.srt").exists()

    def test_label_count_must_match_inputs(self, response_file):
        with pytest.raises(SystemExit) as excinfo:
            main([str(response_file), "--label", "a", "--label", "b"])
        assert excinfo.value.code == 1


class TestActiveAt:
    """--active-at prints the active segment for each lane on stdout."""

    def test_inside_segment(self, response_file, capsys):
        main([str(response_file), "--formats", "srt", "--active-at", "1.0"])
        assert capsys.readouterr().out == "0\t00:00:00.000\tHello there\n"

    def test_silence_gap_keeps_previous(self, response_file, capsys):
        main([str(response_file), "--formats", "srt", "--active-at", "5"])
        assert capsys.readouterr().out.startswith("0\t")

    def test_before_first_segment(self, tmp_path, capsys):
        path = tmp_path / "late.response"
        path.write_text('[{"startTime": "00:05", "endTime": "00:06", "text": "x"}]', encoding="utf-8")
        main([str(path), "--formats", "srt", "--active-at", "1"])
        assert capsys.readouterr().out == "none\n"


class TestErrors:
    """Every failure exits with code 1 and a message on stderr."""

    def _exit_code(self, argv):
        with pytest.raises(SystemExit) as excinfo:
            main(argv)
        return excinfo.value.code

    def test_missing_file(self, tmp_path, capsys):
        assert self._exit_code([str(tmp_path / "nope.response")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_unknown_format(self, response_file, capsys):
        assert self._exit_code([str(response_file), "--formats", "docx"]) == 1
        assert "Unknown format 'docx'" in capsys.readouterr().err

    def test_unknown_variant(self, response_file, capsys):
        assert self._exit_code([str(response_file), "--variant", "dubbed"]) == 1
        assert "Unknown variant" in capsys.readouterr().err

    def test_missing_output_dir(self, response_file, tmp_path):
        argv = [str(response_file), "--output-dir", str(tmp_path / "missing")]
        assert self._exit_code(argv) == 1

    def test_unrecoverable_response(self, tmp_path, capsys):
        path = tmp_path / "bad.response"
        path.write_text("Sorry, I cannot help with that.", encoding="utf-8")
        assert self._exit_code([str(path)]) == 1
        assert "could not be repaired" in capsys.readouterr().err

    def test_failed_lane_does_not_stop_others(self, tmp_path, response_file, capsys):
        bad = tmp_path / "bad.response"
        bad.write_text("Sorry, I cannot help with that.", encoding="utf-8")
        assert self._exit_code([str(bad), str(response_file), "--formats", "srt"]) == 1
        assert (tmp_path / "song.srt").exists()
        assert not (tmp_path / "bad.srt").exists()
        err = capsys.readouterr().err
        assert "Failed: {}".format(bad) in err
        assert "1 of 2 input(s) failed" in err

    def test_empty_response(self, tmp_path, capsys):
        path = tmp_path / "empty.response"
        path.write_text("", encoding="utf-8")
        assert self._exit_code([str(path)]) == 1
        assert "Empty response" in capsys.readouterr().err

    def test_stdin_twice(self, capsys):
        assert self._exit_code(["-", "-"]) == 1


class TestParser:
    """The parser can be inspected without running a conversion."""

    def test_defaults(self):
        args = build_parser().parse_args(["a.response"])
        assert args.inputs == ["a.response"]
        assert args.translations is None
        assert args.labels is None
        assert args.language is None
        assert args.formats is None
        assert args.duration is None
        assert args.active_at is None
        assert args.verbose is False
