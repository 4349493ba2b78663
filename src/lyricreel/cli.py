"""Command-line interface using Click."""

import signal
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config import DEFAULT_ALBUM_ART_SIZE, DEFAULT_FONT_SIZE, DEFAULT_RESOLUTION, FPS
from .core.assets import load_image, probe_audio_duration
from .core.lyrics_io import load_lyrics
from .core.style import (
    AlbumArtPosition,
    ColorTheme,
    FontFamily,
    FontWeight,
    RenderConfiguration,
    Resolution,
)
from .core.render.backgrounds import prepare_backdrop
from .core.render.export import CancelToken, ExportJob, FrameExportPipeline
from .core.render.lyric_timeline import LyricTimeline
from .core.render.progress import ConsoleProgressBar
from .exceptions import ExportCancelled, LyricReelError
from .utils.logging import setup_logging


def _hex(color) -> str:
    return "#{:02x}{:02x}{:02x}".format(*color)


def style_options(func):
    """Options shared by every command that renders lyrics."""
    options = [
        click.option('--resolution', type=click.Choice([r.value for r in Resolution], case_sensitive=False),
                     default=DEFAULT_RESOLUTION, show_default=True, help='Output resolution preset'),
        click.option('--font', 'font_family', type=click.Choice([f.value for f in FontFamily]),
                     default=FontFamily.SANS.value, show_default=True, help='Font family for all text'),
        click.option('--font-weight', type=click.Choice([str(w.value) for w in FontWeight]),
                     default=str(FontWeight.BOLD.value), show_default=True, help='Lyric font weight'),
        click.option('--font-size', type=int, default=DEFAULT_FONT_SIZE, show_default=True,
                     help='Lyric font size in pixels (20-100)'),
        click.option('--stroke-color', default='#000000', show_default=True,
                     help='Text outline color (#RRGGBB)'),
        click.option('--stroke-width', type=float, default=0.0, show_default=True,
                     help='Text outline width in pixels (0 disables the outline)'),
        click.option('--theme', 'color_theme', type=click.Choice([t.value for t in ColorTheme]),
                     default=ColorTheme.LIGHT.value, show_default=True, help='Color theme'),
        click.option('--album-art/--no-album-art', 'include_album_art', default=True,
                     help='Show the cover image as album art'),
        click.option('--album-art-size', type=int, default=DEFAULT_ALBUM_ART_SIZE, show_default=True,
                     help='Album art size as a percentage of the frame height (20-60)'),
        click.option('--album-art-position', type=click.Choice([p.value for p in AlbumArtPosition]),
                     default=AlbumArtPosition.RIGHT.value, show_default=True,
                     help='Album art side'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def media_arguments(func):
    """AUDIO IMAGE LYRICS arguments plus title and artist."""
    func = click.option('--artist', required=True, help='Artist shown under the title')(func)
    func = click.option('--title', required=True, help='Song title shown in the corner')(func)
    func = click.argument('lyrics', type=click.Path(exists=True, dir_okay=False))(func)
    func = click.argument('image', type=click.Path(exists=True, dir_okay=False))(func)
    func = click.argument('audio', type=click.Path(exists=True, dir_okay=False))(func)
    return func


def _load_timeline(lyrics: str, audio: str) -> LyricTimeline:
    # LRC lines need the audio length to close the last line
    duration = None
    if Path(lyrics).suffix.lower() != '.json':
        duration = probe_audio_duration(audio)
    return LyricTimeline(load_lyrics(lyrics, duration))


def _fail(ctx, logger, e: Exception) -> None:
    if isinstance(e, LyricReelError):
        logger.error(f"❌ {e}")
    else:
        logger.error(f"❌ Unexpected error: {e}")
        if ctx.obj.get('verbose'):
            import traceback
            traceback.print_exc()
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', type=click.Path(), help='Log to file')
@click.pass_context
def cli(ctx, verbose, log_file):
    """lyricreel - Karaoke lyric videos with a live preview."""
    ctx.ensure_object(dict)
    logger = setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=Path(log_file) if log_file else None,
        verbose=verbose
    )
    ctx.obj['logger'] = logger
    ctx.obj['verbose'] = verbose


@cli.command()
@media_arguments
@click.option('-o', '--output', help='Output video path (default: "{title} - {artist} (Lyrics).mp4")')
@click.option('--fps', type=int, default=None,
              help=f'Video frame rate (default: {FPS})')
@style_options
@click.option('--no-progress', is_flag=True,
              help='Disable progress bar during rendering')
@click.pass_context
def export(ctx, audio, image, lyrics, title, artist, output, fps, no_progress, **style):
    """Render a lyric video frame by frame and encode it with the audio."""
    logger = ctx.obj['logger']

    try:
        configuration = RenderConfiguration.from_options(**style)
        timeline = _load_timeline(lyrics, audio)
        job = ExportJob(
            audio_path=Path(audio),
            image_path=Path(image),
            title=title,
            artist=artist,
            output_path=Path(output) if output else None,
        )

        # Ctrl+C cancels cooperatively so temporary frames get cleaned up
        token = CancelToken()
        previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: token.cancel())
        try:
            pipeline = FrameExportPipeline(
                job,
                configuration,
                timeline,
                on_progress=None if no_progress else ConsoleProgressBar(),
                cancel_token=token,
                frame_rate=fps or FPS,
            )
            result = pipeline.export()
        finally:
            signal.signal(signal.SIGINT, previous_handler)

        logger.info(f"✅ Lyric video exported: {result}")

    except ExportCancelled as e:
        logger.warning(f"⚠️  {e}")
        sys.exit(130)
    except Exception as e:
        _fail(ctx, logger, e)


@cli.command()
@media_arguments
@style_options
@click.option('--paused', is_flag=True, help='Open the window without starting playback')
@click.pass_context
def preview(ctx, audio, image, lyrics, title, artist, paused, **style):
    """Open a live preview window synchronized to the audio.

    Space plays/pauses, left/right arrows seek, Home restarts, Esc quits.
    """
    logger = ctx.obj['logger']

    try:
        # pygame is only needed here
        from .core.render.pygame_surface import run_preview

        configuration = RenderConfiguration.from_options(**style)
        duration = probe_audio_duration(audio)
        timeline = LyricTimeline(load_lyrics(lyrics, duration))
        backdrop = prepare_backdrop(load_image(image), configuration)

        logger.info(f"Previewing {len(timeline)} lines over {duration:.1f}s")
        run_preview(
            audio,
            backdrop,
            timeline,
            configuration,
            duration,
            title=title,
            artist=artist,
            autoplay=not paused,
        )
    except Exception as e:
        _fail(ctx, logger, e)


@cli.command()
@click.option('--theme', 'name', type=click.Choice([t.value for t in ColorTheme]), default=None,
              help='Show a single theme')
def themes(name: Optional[str]):
    """List the color themes and their colors."""
    selected = [ColorTheme(name)] if name else list(ColorTheme)
    for theme in selected:
        palette = theme.palette
        click.echo(
            f"{theme.value:<10} active={_hex(palette.active)} "
            f"inactive1={_hex(palette.inactive1)} inactive2={_hex(palette.inactive2)} "
            f"info={_hex(palette.info)} sub_info={_hex(palette.sub_info)}"
        )


if __name__ == '__main__':
    cli()
