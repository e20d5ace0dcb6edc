#!/usr/bin/env python

"""
kplay

Headless queue player: plays the given files or URLs through libVLC using
the same session and transport the app surfaces use.

Usage:
    python -m kplay [--shuffle] [--repeat {off,one,all}] [--volume V] SOURCE...
"""

import argparse
import sys
import time
from eliot import log_message, start_action
from kplay.controls import AudioTransport
from kplay.logging import log_error, player_logger, setup_logging
from kplay.models import PlaybackState, RepeatMode, Track
from kplay.session import PlaybackSession
from kplay.utils import format_time
from pathlib import Path

POLL_INTERVAL = 0.2  # seconds
STALL_POLLS = 50


def build_queue(sources: list[str]) -> list[Track]:
    """Turn command line sources into queue tracks, titled after their file name."""
    tracks = []
    for index, source in enumerate(sources):
        title = Path(source.split("?", 1)[0]).stem or source
        tracks.append(Track(id=f"cli-{index}", title=title, artist="Unknown Artist", audio_url=source))
    return tracks


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="kplay", description="Play files or URLs as a queue")
    parser.add_argument("sources", nargs="+", help="Audio files or stream URLs")
    parser.add_argument("--shuffle", action="store_true", help="Pick the next track at random")
    parser.add_argument("--repeat", choices=[mode.value for mode in RepeatMode], default=RepeatMode.OFF.value)
    parser.add_argument("--volume", type=float, default=None, help="Volume between 0 and 1")
    return parser.parse_args(argv)


def now_playing(transport: AudioTransport) -> str:
    """One-line status such as ``Unknown Artist - intro 0:42/3:15``."""
    track = transport.loaded_item
    if track is None:
        return "Nothing playing"
    return f"{track.display_name} {format_time(transport.current_time)}/{format_time(transport.duration)}"


def run(args, element) -> int:
    """Play the queue on ``element`` until it stops or is interrupted."""
    session = PlaybackSession()
    transport = AudioTransport(session, element)

    if args.shuffle:
        transport.toggle_shuffle()
    while transport.repeat_mode.value != args.repeat:
        transport.toggle_repeat()
    if args.volume is not None:
        transport.set_volume(args.volume)

    queue = build_queue(args.sources)
    session.play_track(queue[0], queue)
    transport.play()

    stalled = 0
    announced = None
    try:
        while transport.state != PlaybackState.ENDED:
            if transport.loaded_item is not announced:
                announced = transport.loaded_item
                log_message(message_type="now_playing", description=now_playing(transport))
            # A rejected start leaves the transport idle forever
            stalled = 0 if transport.is_playing else stalled + 1
            if stalled >= STALL_POLLS:
                log_message(message_type="playback_stalled", message="Playback did not start, giving up")
                return 1
            time.sleep(POLL_INTERVAL)
    except KeyboardInterrupt:
        log_message(message_type="playback_interrupted", message="Interrupted, stopping playback")
    finally:
        transport.close()

    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging()

    with start_action(player_logger, "cli_playback", count=len(args.sources)):
        try:
            from kplay.media.vlc_element import VlcMediaElement

            element = VlcMediaElement()
        except Exception as e:
            log_error(player_logger, e, context="vlc_startup")
            print(f"Could not start VLC: {e}", file=sys.stderr)
            return 1

        try:
            return run(args, element)
        finally:
            element.release()


if __name__ == "__main__":
    sys.exit(main())
