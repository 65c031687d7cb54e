#!/usr/bin/env python3
"""
Advanced composition example for clipgraph.

This example demonstrates:
1. A slideshow of still images compiled through the concat fast path
2. Ken Burns motion on a single photo
3. Concatenating timelines and adding an outro
4. Codec configuration and hardware acceleration
"""

import random
from clipgraph import CodecConfiguration, MediaContext, Timeline, compile_timeline
from clipgraph.timeline import add_ken_burns, zoom_in


def slideshow():
    """Three back-to-back photos with a soundtrack."""
    timeline = Timeline()
    for i, photo in enumerate(["beach.jpg", "forest.jpg", "city.jpg"]):
        timeline = timeline.add_image(photo, start_time=i * 4, duration=4)
    return timeline.add_audio("ambient.mp3", volume=0.6, fade_out=2, duration=12)


def ken_burns_intro():
    """A single photo with a seeded, reproducible Ken Burns move."""
    rng = random.Random(42)
    intro = Timeline().add_image("cover.jpg", duration=5)
    intro = add_ken_burns(intro, duration=5, rng=rng)
    return intro.add_text("Summer 2024", position="center", font_size=64)


def main():
    """Run advanced composition example."""
    slides = slideshow()
    print("Slideshow command:")
    print(slides.get_command("slideshow.mp4"))

    intro = ken_burns_intro()
    print("\nIntro command:")
    print(intro.get_command("intro.mp4"))

    # Zoom helpers chain through pipe()
    zoomed = Timeline().add_image("portrait.jpg").pipe(zoom_in, zoom=1.4, duration=6)
    print("\nZoom command:")
    print(zoomed.get_command("zoom.mp4"))

    # Outro starts where the slideshow ends
    outro = Timeline().add_text("Thanks for watching", position="center", duration=3)
    full = slides.concat(outro)
    print(f"\nFull duration: {full.get_duration()}s")

    # Encoder settings: H.265 on an NVIDIA GPU
    configured = full.set_codec(CodecConfiguration.h265(crf=26)).set_hardware_acceleration(
        "nvidia"
    )

    # A custom FFmpeg binary through an explicit media context
    ctx = MediaContext(ffmpeg="/usr/local/bin/ffmpeg")
    command = compile_timeline(configured, "final.mp4", ctx=ctx)
    print("\nFinal argv:")
    print(command.argv())


if __name__ == "__main__":
    main()
