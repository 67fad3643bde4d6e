import sys
import argparse
from captionsync.config import T, E, DEFAULT_EXPECTED_LANGUAGES, load_config
from captionsync.auth import AuthError, get_authenticated_session
from captionsync.api_video import CaptionClient
from captionsync.batch import CaptionOrchestrator, print_summary, write_summary_csv, check_caption_status
from captionsync.localization import Translator
from captionsync.models import Success
from captionsync.usage import display_usage

def show_help(translator):
    """Displays the main help message."""
    print(rf"""
{T.HEADER}╔══════════════════════════════════════════════════╗
║                                                  ║
║        A P I . V I D E O   C A P T I O N         ║
║                   S Y N C                        ║
║                                                  ║
╚══════════════════════════════════════════════════╝
""")
    print(translator.get('main.welcome'))
    print(translator.get('main.commands_header'))
    print(f"{E.PROCESS} sync:    {translator.get('help.sync')}")
    print(f"{E.ROCKET} upload:  {translator.get('help.upload')}")
    print(f"{E.REPORT} status:  {translator.get('help.status')}")

def build_parser(translator):
    parser = argparse.ArgumentParser(prog="captionsync", description=translator.get('args.description'))
    parser.add_argument("-d", "--display-language", default='en', help=translator.get('args.display_language'))
    parser.add_argument("--config", default="config.json", help=translator.get('args.config'))

    subparsers = parser.add_subparsers(dest="command", required=True, help=translator.get('args.command'))

    sync_parser = subparsers.add_parser("sync", help=translator.get('args.sync_help'))
    sync_parser.add_argument("--folder", help=translator.get('args.folder'))
    sync_parser.add_argument("--language", help=translator.get('args.language'))
    sync_parser.add_argument("--report", help=translator.get('args.report'))

    upload_parser = subparsers.add_parser("upload", help=translator.get('args.upload_help'))
    upload_parser.add_argument("video_id", help=translator.get('args.video_id'))
    upload_parser.add_argument("file_path", help=translator.get('args.file_path'))
    upload_parser.add_argument("--language", help=translator.get('args.language'))

    status_parser = subparsers.add_parser("status", help=translator.get('args.status_help'))
    status_parser.add_argument("--folder", help=translator.get('args.folder'))
    status_parser.add_argument("--expected", default=",".join(DEFAULT_EXPECTED_LANGUAGES), help=translator.get('args.expected'))
    status_parser.add_argument("--report", help=translator.get('args.report'))
    return parser

def run_sync(orchestrator, args, translator):
    summary = orchestrator.run(folder=args.folder, language=args.language)
    print_summary(summary, translator)
    if args.report:
        write_summary_csv(summary, args.report, translator)
    return 1 if summary.has_failures else 0

def run_upload(orchestrator, args, translator):
    outcome = orchestrator.run_one(args.video_id, args.file_path, language=args.language)
    if isinstance(outcome, Success):
        print(translator.get('upload.success', T_OK=T.OK, E_SUCCESS=E.SUCCESS, video_id=outcome.video_id))
        return 0
    print(translator.get('upload.failed', T_FAIL=T.FAIL, E_FAIL=E.FAIL, video_id=outcome.video_id, error=outcome.error, step=outcome.step.value))
    return 1

def run_status(client, settings, args, translator):
    expected = [lang.strip() for lang in args.expected.split(",") if lang.strip()]
    df = check_caption_status(client, args.folder or settings.caption_folder, translator, expected_languages=expected, pacing_delay=settings.pacing_delay)
    if args.report:
        df.to_csv(args.report, index=False, encoding='utf-8')
        print(translator.get('status.report_written', T_OK=T.OK, E_SUCCESS=E.SUCCESS, csv_path=args.report))
    return 1 if (df['error'] != '').any() else 0

def main(argv=None):
    """Main function to run the command line tool."""
    argv = sys.argv[1:] if argv is None else argv

    # Quick parse for the display language before full parsing
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("-d", "--display-language", default='en')
    pre_args, remaining = pre_parser.parse_known_args(argv)

    translator = Translator(pre_args.display_language)

    if not remaining:
        show_help(translator)
        sys.exit(0)

    args = build_parser(translator).parse_args(argv)
    exit_code = 0
    try:
        settings = load_config(translator, config_file=args.config)
        session = get_authenticated_session(settings, translator)
        client = CaptionClient(session, settings.api_base_url, translator, timeout=settings.request_timeout)

        if args.command == "sync":
            exit_code = run_sync(CaptionOrchestrator(client, settings, translator), args, translator)
        elif args.command == "upload":
            exit_code = run_upload(CaptionOrchestrator(client, settings, translator), args, translator)
        elif args.command == "status":
            exit_code = run_status(client, settings, args, translator)

    except AuthError as e:
        print(translator.get('main.auth_error', T_FAIL=T.FAIL, E_FAIL=E.FAIL, e=e))
        exit_code = 1
    except Exception as e:
        print(translator.get('main.fatal_error', T_FAIL=T.FAIL, E_FAIL=E.FAIL, e=e))
        exit_code = 1
    finally:
        display_usage(translator)

    sys.exit(exit_code)

if __name__ == "__main__":
    main()
