import re
from collections import namedtuple

VIDEO_ID_PATTERN = re.compile(r'^\[([^\]]+)\]')

VideoIdentity = namedtuple("VideoIdentity", ["video_id", "present"])

def resolve(filename):
    """
    Extracts the video id from a caption filename of the form '[videoId]_Title_en.vtt'.
    Returns VideoIdentity(None, False) when the filename does not start with a bracketed id.
    """
    name = filename[:-len(".vtt")] if filename.endswith(".vtt") else filename
    match = VIDEO_ID_PATTERN.match(name)
    if match:
        return VideoIdentity(match.group(1), True)
    return VideoIdentity(None, False)
