import os
import time
import pandas as pd

from captionsync.config import T, E, CAPTION_SUFFIX, DEFAULT_EXPECTED_LANGUAGES
from captionsync.api_video import TransportError
from captionsync.identity import resolve
from captionsync.models import BatchSummary, LocalCaptionFile, ReconciliationTarget, Failure
from captionsync.reconciler import reconcile

SUMMARY_COLUMNS = ['video_id', 'filename', 'language', 'status', 'step', 'error']

def discover_caption_files(folder):
    """Lists the caption files in a folder, resolving the video id embedded in each filename."""
    if not os.path.isdir(folder):
        raise FileNotFoundError(f"Caption folder not found: '{folder}'")

    caption_files = []
    for filename in sorted(os.listdir(folder)):
        if not filename.lower().endswith(CAPTION_SUFFIX):
            continue
        identity = resolve(filename)
        caption_files.append(LocalCaptionFile(filename, os.path.join(folder, filename), identity.video_id))
    return caption_files


class CaptionOrchestrator:
    """Runs caption reconciliation over a folder of caption files, one video at a time."""

    def __init__(self, client, settings, translator, sleep=time.sleep):
        self.client = client
        self.settings = settings
        self.translator = translator
        self.sleep = sleep

    def run(self, folder=None, language=None, should_stop=None):
        folder = folder or self.settings.caption_folder
        language = language or self.settings.default_language
        summary = BatchSummary(language=language)

        caption_files = discover_caption_files(folder)
        if not caption_files:
            print(self.translator.get('batch.no_files', T_WARN=T.WARN, E_EMPTY=E.EMPTY, folder=folder))
            summary.nothing_to_do = True
            return summary

        resolvable = [f for f in caption_files if f.video_id is not None]
        summary.unresolvable.extend(f for f in caption_files if f.video_id is None)
        self._print_overview(caption_files, resolvable, summary.unresolvable, language)

        if not resolvable:
            print(self.translator.get('batch.no_resolvable', T_WARN=T.WARN, E_WARN=E.WARN))
            summary.nothing_to_do = True
            return summary

        print(self.translator.get('batch.starting', T_HEADER=T.HEADER, E_ROCKET=E.ROCKET, count=len(resolvable)))
        for i, caption_file in enumerate(resolvable):
            if i > 0:
                if should_stop is not None and should_stop():
                    print(self.translator.get('batch.stopped', T_WARN=T.WARN, E_WARN=E.WARN, done=i, total=len(resolvable)))
                    summary.stopped_early = True
                    break
                self.sleep(self.settings.pacing_delay)

            print(self.translator.get('batch.processing', T_INFO=T.INFO, E_PROCESS=E.PROCESS, i=i+1, total=len(resolvable), filename=caption_file.filename))
            target = ReconciliationTarget(caption_file.video_id, caption_file, language)
            summary.record(target, reconcile(self.client, target, self.translator))

        return summary

    def run_one(self, video_id, file_path, language=None):
        """Reconciles a single video from an explicit id and path, bypassing discovery and pacing."""
        language = language or self.settings.default_language
        caption_file = LocalCaptionFile(os.path.basename(file_path), file_path, video_id)
        return reconcile(self.client, ReconciliationTarget(video_id, caption_file, language), self.translator)

    def _print_overview(self, caption_files, resolvable, unresolvable, language):
        print(self.translator.get('batch.overview_header', T_HEADER=T.HEADER, E_REPORT=E.REPORT))
        print(self.translator.get('batch.overview_total', total=len(caption_files)))
        print(self.translator.get('batch.overview_resolvable', count=len(resolvable)))
        print(self.translator.get('batch.overview_unresolvable', count=len(unresolvable)))
        print(self.translator.get('batch.overview_language', E_GLOBE=E.GLOBE, language=language))

        if unresolvable:
            print(self.translator.get('batch.unresolvable_header', T_WARN=T.WARN, E_WARN=E.WARN))
            for caption_file in unresolvable:
                print(self.translator.get('batch.unresolvable_item', filename=caption_file.filename))
            print(self.translator.get('batch.expected_format', T_INFO=T.INFO))


def print_summary(summary, translator):
    """Prints the end-of-run summary, listing every failure with its step and error."""
    print(translator.get('batch.summary_header', T_HEADER=T.HEADER, E_REPORT=E.REPORT))
    print(translator.get('batch.summary_success', T_OK=T.OK, E_SUCCESS=E.SUCCESS, count=summary.success_count))
    print(translator.get('batch.summary_failure', T_FAIL=T.FAIL, E_FAIL=E.FAIL, count=summary.failure_count))
    print(translator.get('batch.summary_unresolvable', T_WARN=T.WARN, E_WARN=E.WARN, count=len(summary.unresolvable)))

    if summary.has_failures:
        print(translator.get('batch.failures_header', T_FAIL=T.FAIL, E_FAIL=E.FAIL))
        for result in summary.failures:
            outcome = result.outcome
            print(translator.get('batch.failure_item', filename=result.target.caption_file.filename, video_id=outcome.video_id, step=outcome.step.value, error=outcome.error))

    if summary.success_count:
        print(translator.get('batch.summary_done', T_OK=T.OK, E_SUCCESS=E.SUCCESS, count=summary.success_count))

def write_summary_csv(summary, csv_path, translator):
    """Writes one row per processed target and per unresolvable file."""
    rows = []
    for result in summary.results:
        outcome = result.outcome
        is_failure = isinstance(outcome, Failure)
        rows.append({
            'video_id': result.target.video_id, 'filename': result.target.caption_file.filename,
            'language': result.target.language, 'status': 'failed' if is_failure else 'success',
            'step': outcome.step.value if is_failure else '', 'error': outcome.error if is_failure else ''
        })
    for caption_file in summary.unresolvable:
        rows.append({
            'video_id': '', 'filename': caption_file.filename, 'language': summary.language,
            'status': 'unresolvable', 'step': '', 'error': ''
        })

    df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    df.to_csv(csv_path, index=False, encoding='utf-8')
    print(translator.get('batch.report_written', T_OK=T.OK, E_SUCCESS=E.SUCCESS, csv_path=csv_path))
    return df

def check_caption_status(client, folder, translator, expected_languages=DEFAULT_EXPECTED_LANGUAGES, pacing_delay=1.0, sleep=time.sleep):
    """
    Compares the remote captions of every video found in the folder against the expected languages.
    Returns a DataFrame with one row per video.
    """
    video_ids = []
    for caption_file in discover_caption_files(folder):
        if caption_file.video_id is not None and caption_file.video_id not in video_ids:
            video_ids.append(caption_file.video_id)

    columns = ['video_id'] + [f'has_{lang}' for lang in expected_languages] + ['missing', 'error']
    if not video_ids:
        print(translator.get('status.no_videos', T_WARN=T.WARN, E_EMPTY=E.EMPTY, folder=folder))
        return pd.DataFrame([], columns=columns)

    print(translator.get('status.header', T_HEADER=T.HEADER, E_REPORT=E.REPORT, count=len(video_ids), languages=', '.join(expected_languages)))
    rows = []
    for i, video_id in enumerate(video_ids):
        if i > 0:
            sleep(pacing_delay)
        print(translator.get('status.checking', T_INFO=T.INFO, E_VIDEO=E.VIDEO, i=i+1, total=len(video_ids), video_id=video_id))
        row = {'video_id': video_id, 'missing': '', 'error': ''}
        try:
            available = {track.language for track in client.list_captions(video_id)}
        except TransportError as e:
            print(translator.get('status.check_failed', T_FAIL=T.FAIL, E_FAIL=E.FAIL, e=e))
            row['error'] = str(e)
            rows.append(row)
            continue

        missing = [lang for lang in expected_languages if lang not in available]
        for lang in expected_languages:
            row[f'has_{lang}'] = lang in available
        row['missing'] = ','.join(missing)
        if missing:
            print(translator.get('status.incomplete', T_WARN=T.WARN, E_WARN=E.WARN, missing=', '.join(missing)))
        else:
            print(translator.get('status.complete', T_OK=T.OK, E_SUCCESS=E.SUCCESS))
        rows.append(row)

    df = pd.DataFrame(rows, columns=columns)
    failed = int((df['error'] != '').sum())
    incomplete = int(((df['missing'] != '') & (df['error'] == '')).sum())
    print(translator.get('status.summary', T_HEADER=T.HEADER, complete=len(df) - failed - incomplete, incomplete=incomplete, failed=failed))
    return df
