from captionsync.config import T, E
from captionsync.api_video import TransportError
from captionsync.models import Step, Success, Failure

def read_caption_file(path):
    """Reads the raw caption bytes. Raises FileNotFoundError if the file is gone."""
    with open(path, 'rb') as f:
        return f.read()

def reconcile(client, target, translator):
    """
    Makes the remote captions of one video hold exactly one track for the target language.

    Runs list, then delete when a track for the language exists, then upload. The first
    failing step ends the sequence, so a failed delete never falls through to the upload. Returns a Success or a Failure tagged
    with the step that failed. Step errors are never raised to the caller.
    """
    video_id, language = target.video_id, target.language
    caption_file = target.caption_file
    print(translator.get('reconcile.header', T_HEADER=T.HEADER, E_VIDEO=E.VIDEO, language=language, video_id=video_id))
    print(translator.get('reconcile.file', T_INFO=T.INFO, E_FILE=E.FILE, path=caption_file.path))

    try:
        tracks = client.list_captions(video_id)
    except TransportError as e:
        return Failure(Step.LIST, video_id, str(e))

    if any(track.language == language for track in tracks):
        print(translator.get('reconcile.existing_found', T_INFO=T.INFO, language=language))
        try:
            client.delete_caption(video_id, language)
        except TransportError as e:
            return Failure(Step.DELETE, video_id, str(e))
    else:
        print(translator.get('reconcile.no_existing', T_INFO=T.INFO, E_INFO=E.INFO, language=language))

    try:
        contents = read_caption_file(caption_file.path)
        client.upload_caption(video_id, language, contents, caption_file.filename)
    except FileNotFoundError:
        return Failure(Step.UPLOAD, video_id, translator.get('reconcile.file_missing', path=caption_file.path))
    except (TransportError, OSError) as e:
        return Failure(Step.UPLOAD, video_id, str(e))

    print(translator.get('reconcile.success', T_OK=T.OK, E_SUCCESS=E.SUCCESS, language=language, video_id=video_id))
    return Success(video_id, language)
