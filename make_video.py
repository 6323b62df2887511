import os
import argparse
import shutil
import subprocess
import tempfile
import pygame
import numpy as np
import cv2

import config
from audio import TouchRecorder, generate_blip, mix_blips, write_wav
from grid import load_grid_families
from main import GridRhythm


def surface_to_bgr(surface):
    """Convert a pygame surface to an OpenCV BGR frame."""
    w, h = surface.get_size()
    raw = pygame.image.tostring(surface, "RGB")
    frame = np.frombuffer(raw, dtype=np.uint8).reshape((h, w, 3))  # row-major RGB
    return cv2.cvtColor(frame, cv2.COLOR_RGB2BGR)


def record_video(
    seconds: float = None,
    fps: int = None,
    width: int = None,
    height: int = None,
    families=None,
    out_path: str | None = None,
):
    """Render the visualizer headless to an MP4, with a blip under every touch when ffmpeg is available."""
    seconds = seconds if seconds is not None else config.VIDEO_SECONDS
    fps = fps if fps is not None else config.VIDEO_FPS
    width = width if width is not None else config.WINDOW_WIDTH
    height = height if height is not None else config.WINDOW_HEIGHT

    out_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), config.VIDEO_OUTPUT_DIR)
    os.makedirs(out_dir, exist_ok=True)
    if out_path is None:
        out_path = os.path.join(out_dir, "grythm.mp4")
    elif not os.path.isabs(out_path):
        out_path = os.path.join(out_dir, out_path)

    fourcc = cv2.VideoWriter_fourcc(*config.VIDEO_CODEC)
    writer = cv2.VideoWriter(out_path, fourcc, float(fps), (width, height))
    if not writer.isOpened():
        raise RuntimeError("Failed to open video writer. Ensure the codec is available.")

    total_frames = max(1, int(round(seconds * fps)))
    frame_counter = 0

    def on_frame(surface, scene, events):
        nonlocal frame_counter
        writer.write(surface_to_bgr(surface))
        frame_counter += 1
        # Lightweight progress every ~2 seconds
        if frame_counter % max(1, fps * 2) == 0:
            print(f"Rendered {frame_counter}/{total_frames} frames, {scene.touch_count} touches")

    app = GridRhythm(
        width=width,
        height=height,
        fps=fps,
        families=families,
        headless=True,
        max_frames=total_frames,
        frame_callback=on_frame,
    )
    recorder = TouchRecorder()
    app.scene.add_sink(recorder)
    try:
        app.run()
    finally:
        writer.release()

    ffmpeg = shutil.which("ffmpeg")
    if not ffmpeg:
        print("Skipping audio mux: ffmpeg not found in PATH")
        return out_path
    if not recorder.events:
        print("Skipping audio mux: no touches recorded")
        return out_path

    # Touches are stamped at the end of their tick; the frame showing them starts one step earlier
    frame_dt = 1.0 / float(fps)
    times = [max(0.0, t - frame_dt) for t in recorder.times]

    with tempfile.TemporaryDirectory() as workdir:
        blip = generate_blip(sample_rate=config.SAMPLE_RATE, channels=2)
        track = mix_blips(times, blip, config.SAMPLE_RATE, frame_counter * frame_dt,
                          tail=config.VIDEO_TAIL_SECONDS)
        mixed_wav = os.path.join(workdir, "mixed.wav")
        write_wav(mixed_wav, track, config.SAMPLE_RATE)

        # Mux into a new MP4 without re-encoding video; keep shortest
        out_mux = os.path.splitext(out_path)[0] + "_with_audio.mp4"
        cmd = [ffmpeg, "-y", "-i", out_path, "-i", mixed_wav, "-map", "0:v:0", "-map", "1:a:0",
               "-c:v", "copy", "-shortest", out_mux]
        subprocess.run(cmd, check=True, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        print(f"Audio muxed: {len(times)} blips -> {out_mux}")
    return out_mux


def main():
    parser = argparse.ArgumentParser(description="Record the grid rhythm visualizer to an MP4 with a blip at every touch.")
    parser.add_argument("--seconds", type=float, default=config.VIDEO_SECONDS, help="Video length in seconds")
    parser.add_argument("--fps", type=int, default=config.VIDEO_FPS, help="Video and simulation FPS")
    parser.add_argument("--width", type=int, default=config.WINDOW_WIDTH, help="Frame width in pixels")
    parser.add_argument("--height", type=int, default=config.WINDOW_HEIGHT, help="Frame height in pixels")
    parser.add_argument("--grids", type=str, default=None, help="JSON file with grid families")
    parser.add_argument("--out", type=str, default=None, help=f"Output MP4 path (default: {config.VIDEO_OUTPUT_DIR}/grythm.mp4)")
    args = parser.parse_args()

    families = load_grid_families(args.grids) if args.grids else None
    out_path = record_video(
        seconds=args.seconds,
        fps=args.fps,
        width=args.width,
        height=args.height,
        families=families,
        out_path=args.out,
    )
    print(f"Saved: {out_path}")


if __name__ == "__main__":
    main()
