#!/usr/bin/env python3
"""
Basic usage example for clipgraph.

This example demonstrates:
1. Building a timeline from a video, a title and a soundtrack
2. Printing the FFmpeg command it compiles to
3. Saving the timeline as JSON and loading it back
"""

import logging
from clipgraph import Timeline, RenderOptions, Quality


def main():
    """Run basic usage example."""
    logging.basicConfig(level=logging.INFO)

    # Every builder returns a new timeline
    timeline = (
        Timeline()
        .add_video("input.mp4")
        .add_text(
            "Welcome",
            position="top",
            start_time=1,
            duration=3,
            font_size=48,
            color="yellow",
        )
        .add_audio("music.mp3", volume=0.3, fade_in=2)
        .add_watermark("logo.png", position="bottom-right")
        .set_aspect_ratio("16:9")
        .scale(1280, 720)
    )

    print(f"Estimated duration: {timeline.get_duration()}s")

    # Compile only, nothing is executed
    command = timeline.get_command(
        "output.mp4", RenderOptions(quality=Quality.HIGH, preset="slow")
    )
    print(command)

    # render() validates, reports status and logs the command
    def status_callback(status):
        print(f"Status: {status}")

    timeline.render("output.mp4", on_status=status_callback)

    # Round-trip through JSON
    data = timeline.to_json()
    restored = Timeline.from_json(data)
    print(f"Restored timeline matches: {restored == timeline}")


if __name__ == "__main__":
    main()
