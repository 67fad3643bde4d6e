import requests
from google.auth import exceptions as ga_exceptions

from captionsync.config import T, E
from captionsync.models import CaptionTrack
from captionsync.usage import record_api_call

VTT_CONTENT_TYPE = "text/vtt"


class TransportError(Exception):
    """A caption API call failed, either with a non-2xx status or at the network level."""

    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status


class CaptionClient:
    """List, delete and upload caption tracks of api.video videos."""

    def __init__(self, session, base_url, translator, timeout=30):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.translator = translator
        self.timeout = timeout

    def _captions_url(self, video_id, language=None):
        url = f"{self.base_url}/videos/{video_id}/captions"
        return f"{url}/{language}" if language else url

    def _send(self, method, url, **kwargs):
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except (requests.RequestException, ga_exceptions.GoogleAuthError) as e:
            raise TransportError(str(e)) from e

    def list_captions(self, video_id):
        """Returns every caption track of a video, following pagination."""
        print(self.translator.get('api.listing_captions', T_INFO=T.INFO, E_LIST=E.LIST, video_id=video_id))
        tracks = []
        url = self._captions_url(video_id)
        visited = set()
        while url and url not in visited:
            visited.add(url)
            response = self._send("GET", url)
            record_api_call('captions.list')
            if not 200 <= response.status_code < 300:
                print(self.translator.get('api.list_failed', T_FAIL=T.FAIL, E_FAIL=E.FAIL, video_id=video_id, status=response.status_code))
                raise TransportError(f"HTTP {response.status_code}", status=response.status_code)

            try:
                body = response.json()
                tracks.extend(CaptionTrack.from_api(item) for item in body.get('data', []))
                url = self._next_page(body)
            except (ValueError, AttributeError, TypeError) as e:
                print(self.translator.get('api.list_invalid_body', T_FAIL=T.FAIL, E_FAIL=E.FAIL, video_id=video_id))
                raise TransportError(f"Invalid response body: {e}", status=response.status_code) from e

        print(self.translator.get('api.list_success', T_OK=T.OK, E_SUCCESS=E.SUCCESS, count=len(tracks), video_id=video_id))
        return tracks

    def _next_page(self, body):
        for link in body.get('pagination', {}).get('links', []):
            if link.get('rel') == 'next' and link.get('uri'):
                uri = link['uri']
                return uri if uri.startswith("http") else f"{self.base_url}{uri}"
        return None

    def delete_caption(self, video_id, language):
        """Deletes one caption track. A track that is already gone counts as deleted."""
        print(self.translator.get('api.deleting_caption', T_INFO=T.INFO, E_TRASH=E.TRASH, language=language, video_id=video_id))
        response = self._send("DELETE", self._captions_url(video_id, language))
        record_api_call('captions.delete')

        if response.status_code == 404:
            print(self.translator.get('api.delete_not_found', T_INFO=T.INFO, E_INFO=E.INFO, language=language, video_id=video_id))
            return
        if not 200 <= response.status_code < 300:
            print(self.translator.get('api.delete_failed', T_FAIL=T.FAIL, E_FAIL=E.FAIL, language=language, video_id=video_id, status=response.status_code))
            raise TransportError(f"HTTP {response.status_code}", status=response.status_code)
        print(self.translator.get('api.delete_success', T_OK=T.OK, E_SUCCESS=E.SUCCESS, language=language, video_id=video_id))

    def upload_caption(self, video_id, language, contents, filename):
        """Uploads a WebVTT file as the caption track for the given language."""
        print(self.translator.get('api.uploading_caption', T_INFO=T.INFO, E_ROCKET=E.ROCKET, language=language, video_id=video_id, filename=filename))
        files = {'file': (filename, contents, VTT_CONTENT_TYPE)}
        response = self._send("POST", self._captions_url(video_id, language), files=files)
        record_api_call('captions.upload')

        if response.status_code not in (200, 201):
            print(self.translator.get('api.upload_failed', T_FAIL=T.FAIL, E_FAIL=E.FAIL, language=language, video_id=video_id, status=response.status_code))
            raise TransportError(f"HTTP {response.status_code}", status=response.status_code)
        print(self.translator.get('api.upload_success', T_OK=T.OK, E_SUCCESS=E.SUCCESS, language=language, video_id=video_id))
