import pytest
from captionsync.identity import resolve

@pytest.mark.parametrize("filename, video_id", [
    ("[abc]x.vtt", "abc"),
    ("[vid1]_Title_en.vtt", "vid1"),
    ("[vi2Y2FFzw8IVMZ8hXyKTBmcJ]_Exe_4.mp4.vtt", "vi2Y2FFzw8IVMZ8hXyKTBmcJ"),
    ("[abc]", "abc"),
    ("[a b]rest.VTT", "a b"),
])
def test_resolve_bracketed_filenames(filename, video_id):
    """Filenames starting with a bracketed id resolve to that id."""
    identity = resolve(filename)
    assert identity.present is True
    assert identity.video_id == video_id

@pytest.mark.parametrize("filename", [
    "plain.vtt",
    "[]empty.vtt",
    "x[abc].vtt",
    " [abc]leading_space.vtt",
    "[unclosed.vtt",
])
def test_resolve_non_matching_filenames(filename):
    """Names without a leading bracketed id are reported as absent, not raised."""
    identity = resolve(filename)
    assert identity.present is False
    assert identity.video_id is None

def test_resolve_only_strips_trailing_suffix():
    """Only the final lowercase .vtt is stripped before matching."""
    assert resolve("[id].vtt").video_id == "id"
    assert resolve("[id.vtt]x.vtt").video_id == "id.vtt"

@pytest.mark.parametrize("filename", ["[abc]x.vtt", "plain.vtt", "[]", ""])
def test_resolve_is_deterministic(filename):
    assert resolve(filename) == resolve(filename)
