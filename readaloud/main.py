import logging
from datetime import datetime

import click
import uvicorn
from dotenv import load_dotenv

from readaloud.app import create_app
from readaloud.config import DEFAULT_TEST_MESSAGE, Config
from readaloud.errors import ReadaloudError
from readaloud.models import GenerateRequest, GenerateTestRequest
from readaloud.service import NarrationService


def _setup_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _service(ctx) -> NarrationService:
    return NarrationService(ctx.obj["config"])


def _fail(e: ReadaloudError):
    click.echo(f"Error: {e.message}", err=True)
    raise click.exceptions.Exit(1)


def _echo_entry(entry):
    created = datetime.fromtimestamp(entry.created_at / 1000).strftime("%Y-%m-%d %H:%M:%S")
    click.echo(f"{created}  {entry.chapter:<30.30}  {entry.voice:<8}  {entry.model:<10}  {entry.audio_url}")


@click.group()
@click.option("--log-level", default=None, help="Log level (debug, info, warning, error)")
@click.pass_context
def cli(ctx, log_level):
    load_dotenv()
    config = Config()
    _setup_logging(log_level or config.log_level)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.option("--host", default=None, help="Interface to bind")
@click.option("--port", default=None, type=int, help="Port to listen on")
@click.pass_context
def serve(ctx, host, port):
    config = ctx.obj["config"]
    try:
        app = create_app(config)
    except ReadaloudError as e:
        _fail(e)

    host = host or config.get("host")
    port = port or config.get_int("port")
    click.echo(f"Server listening at http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=config.log_level.lower())


@cli.command()
@click.pass_context
def chapters(ctx):
    names = _service(ctx).list_chapters()
    if not names:
        click.echo("No chapters found.")
        return
    for name in names:
        click.echo(name)


@cli.command()
@click.argument("chapter")
@click.option("--voice", required=True, help="TTS voice, e.g. alloy")
@click.option("--model", default=None, help="TTS model (default from DEFAULT_MODEL)")
@click.option("--speed", default=None, type=float, help="Playback speed passed to the provider")
@click.pass_context
def generate(ctx, chapter, voice, model, speed):
    service = _service(ctx)
    request = GenerateRequest(chapterName=chapter, voice=voice, model=model, speed=speed)
    try:
        entry = service.generate(request)
    except ReadaloudError as e:
        _fail(e)
    click.echo(f"Generated {entry.audio_url}")


@cli.command()
@click.option("--voice", required=True, help="TTS voice, e.g. alloy")
@click.option("--message", default=DEFAULT_TEST_MESSAGE, show_default=True, help="Text to speak")
@click.option("--model", default=None, help="TTS model (default from DEFAULT_MODEL)")
@click.option("--speed", default=None, type=float, help="Playback speed passed to the provider")
@click.pass_context
def test(ctx, voice, message, model, speed):
    service = _service(ctx)
    request = GenerateTestRequest(voice=voice, message=message, model=model, speed=speed)
    try:
        entry = service.generate_test(request)
    except ReadaloudError as e:
        _fail(e)
    click.echo(f"Generated {entry.audio_url}")


@cli.command()
@click.pass_context
def audios(ctx):
    entries = sorted(_service(ctx).list_audios(), key=lambda e: e.created_at, reverse=True)
    if not entries:
        click.echo("No audio files yet.")
        return
    for entry in entries:
        _echo_entry(entry)


@cli.command()
@click.argument("audio_url")
@click.pass_context
def delete(ctx, audio_url):
    try:
        _service(ctx).delete_audio(audio_url)
    except ReadaloudError as e:
        _fail(e)
    click.echo(f"Deleted {audio_url}")


if __name__ == "__main__":
    cli()
