from __future__ import annotations

import sys

from nix_tts.application.errors import MissingDependencyError
from nix_tts.config import AppConfig
from nix_tts.di_container import AppContainer, build_container
from nix_tts.infrastructure.onnx.speech_model import inference_errors
from nix_tts.utils.args import parse_args
from nix_tts.utils.env import load_dotenv


def _read_text(text: str | None) -> str:
    if text is not None:
        return text
    text = sys.stdin.read().strip()
    if not text:
        raise ValueError("No text given; pass it as an argument or on stdin.")
    return text


def _print_tokens(container: AppContainer, text: str) -> None:
    batch = container.tokenizer.tokenize([text])
    print(f"Text: {text}")
    print(f"Phonemes: {list(batch.phonemes)}")
    print(f"Tokens: {[list(tokens) for tokens in batch.tokens]}")
    print(f"Token lengths: {list(batch.lengths)}")


def _synthesize(
    container: AppContainer,
    text: str,
    *,
    output: str | None,
    play: bool,
    speaker_id: int | None,
) -> None:
    service = container.synthesis_service
    assert service is not None

    service.init()

    if play and container.audio_output is not None:
        samples = service.speak(text, speaker_id=speaker_id)
        if output:
            print(f"Wrote {service.write(samples, output)}")
        try:
            container.audio_output.wait()
        except KeyboardInterrupt:
            container.audio_output.interrupt()
            raise
    elif output:
        print(f"Wrote {service.save(text, output, speaker_id=speaker_id)}")
    else:
        service.vocalize(text, speaker_id=speaker_id)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    load_dotenv(args.env_file)

    play = not args.no_play and not args.tokens_only
    runtime_errors = inference_errors()
    container: AppContainer | None = None

    try:
        text = _read_text(args.text)
        config = AppConfig.from_env(require_model=not args.tokens_only)
        container = build_container(config, with_audio_output=play)
        if args.verbose:
            container.logger.on_emit = lambda line: print(line, file=sys.stderr)

        if args.tokens_only:
            _print_tokens(container, text)
        else:
            _synthesize(
                container,
                text,
                output=args.output,
                play=play,
                speaker_id=args.speaker_id,
            )
        return 0
    except MissingDependencyError as exc:
        print(f"Missing dependency: {exc}", file=sys.stderr)
        return 4
    except ValueError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 2
    except (OSError, RuntimeError, *runtime_errors) as exc:
        print(f"Synthesis failed: {exc}", file=sys.stderr)
        return 3
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130
    finally:
        if container is not None and args.save_log:
            container.logger.save()


if __name__ == "__main__":
    raise SystemExit(main())
