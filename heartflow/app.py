"""
heartflow - particles flowing from hands, face and feet into the heart.

Live mode opens the webcam and a pygame window. Offline mode (--video) runs
the same simulation over a recorded clip and writes `<name>_flow.mp4` next to
it, keeping the clip's original audio.

Usage:
    heartflow [--camera 0] [--width 960 --height 720] [--walls] [--no-legs]
    heartflow --video clip.mp4

Live keys:
    q / ESC  quit
    f        toggle FPS display
    v        toggle faint video background
    s        toggle pose skeleton overlay
    b        toggle trail blur
"""

import argparse
import os
import tempfile
import time

import cv2
import pygame
from moviepy import VideoFileClip

from .config import MODEL_DIR, REPORT_EVERY, SAMPLE_HEIGHT, SAMPLE_WIDTH, FlowConfig
from .engine import FlowEngine
from .render import FlowRenderer, surface_to_bgr
from .tracker import LandmarkTracker
from .video import VideoSampler


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="heartflow", description="Landmark-driven particle flow toward the heart")
    parser.add_argument("--camera", type=int, default=0, help="webcam index (live mode)")
    parser.add_argument("--video", default=None, help="render a recorded clip instead of the webcam")
    parser.add_argument("--width", type=int, default=FlowConfig.width)
    parser.add_argument("--height", type=int, default=FlowConfig.height)
    parser.add_argument("--max-age", type=int, default=FlowConfig.max_age)
    parser.add_argument("--pose-model", choices=["lite", "full"], default="lite")
    parser.add_argument("--model-dir", default=str(MODEL_DIR))
    parser.add_argument("--walls", action="store_true", help="keep travelers inside the canvas")
    parser.add_argument("--no-legs", action="store_true", help="do not emit from the feet")
    return parser


def config_from_args(args: argparse.Namespace) -> FlowConfig:
    return FlowConfig(
        width=args.width,
        height=args.height,
        max_age=args.max_age,
        walls=args.walls,
        legs=not args.no_legs,
    )


def run_live(config: FlowConfig, camera: int = 0, pose_model: str = "lite", model_dir: str = str(MODEL_DIR)):
    """
    Run the simulation on the webcam feed until the window is closed.

    Args:
        config: Run configuration
        camera: OpenCV camera index
        pose_model: "lite" or "full" pose landmarker
        model_dir: Where the MediaPipe models are cached
    """
    cap = cv2.VideoCapture(camera)
    if not cap.isOpened():
        print("Failed to open camera")
        return

    pygame.init()
    screen = pygame.display.set_mode((config.width, config.height))
    pygame.display.set_caption("heartflow")
    clock = pygame.time.Clock()

    engine = FlowEngine.default(config)
    sampler = VideoSampler(config.width, config.height, (SAMPLE_WIDTH, SAMPLE_HEIGHT))
    renderer = FlowRenderer(screen, sampler)
    tracker = LandmarkTracker(model_dir=model_dir, pose_model=pose_model)
    start = time.monotonic()

    try:
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key in (pygame.K_ESCAPE, pygame.K_q):
                        running = False
                    elif event.key == pygame.K_f:
                        renderer.show_fps = not renderer.show_fps
                    elif event.key == pygame.K_v:
                        renderer.show_video = not renderer.show_video
                    elif event.key == pygame.K_s:
                        renderer.show_skeleton = not renderer.show_skeleton
                    elif event.key == pygame.K_b:
                        renderer.blur_trails = not renderer.blur_trails

            ok, frame = cap.read()
            if not ok:
                print("Failed to capture frame")
                break

            now_ms = (time.monotonic() - start) * 1000.0
            landmarks = tracker.detect(frame, now_ms)
            sampler.update(frame)

            renderer.begin_frame(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB) if renderer.show_video else None)
            stats = engine.process(landmarks, now_ms, renderer)
            renderer.end_frame(landmarks.first_pose(), engine.mapper, clock.get_fps())
            pygame.display.flip()
            clock.tick(60)

            if engine.frame_count % REPORT_EVERY == 0:
                print(f"n travelers: {stats['live']}")
    finally:
        tracker.close()
        cap.release()
        pygame.quit()


def render_video(filename: str, config: FlowConfig, pose_model: str = "lite", model_dir: str = str(MODEL_DIR)) -> str:
    """
    Run the simulation over a recorded clip and write `<name>_flow.mp4`.

    The simulation is stepped once per video frame using the clip's own
    timestamps. Frames are encoded with OpenCV, then the original audio track
    (if any) is muxed back in with moviepy.

    Args:
        filename: Input video path
        config: Run configuration
        pose_model: "lite" or "full" pose landmarker
        model_dir: Where the MediaPipe models are cached

    Returns:
        Path of the written video, or "" if the input could not be opened
    """
    cap = cv2.VideoCapture(filename)
    if not cap.isOpened():
        print("Failed to open video file")
        return ""

    fps = cap.get(cv2.CAP_PROP_FPS)
    if not fps or fps <= 0:
        print("Warning: Could not detect FPS, defaulting to 30")
        fps = 30.0
    total_frames = int(cap.get(cv2.CAP_PROP_FRAME_COUNT))
    print(f"Rendering {filename}: {total_frames} frames @ {fps} FPS")

    surface = pygame.Surface((config.width, config.height))
    engine = FlowEngine.default(config)
    sampler = VideoSampler(config.width, config.height, (SAMPLE_WIDTH, SAMPLE_HEIGHT))
    renderer = FlowRenderer(surface, sampler)

    fd, silent_path = tempfile.mkstemp(suffix=".mp4")
    os.close(fd)
    writer = cv2.VideoWriter(silent_path, cv2.VideoWriter_fourcc(*"mp4v"), fps, (config.width, config.height))

    frame_idx = 0
    try:
        with LandmarkTracker(model_dir=model_dir, pose_model=pose_model) as tracker:
            while True:
                ok, frame = cap.read()
                if not ok:
                    break
                # Prefer the container timestamp; fall back to the frame index
                pos_ms = cap.get(cv2.CAP_PROP_POS_MSEC)
                now_ms = pos_ms if pos_ms and pos_ms > 0 else frame_idx * 1000.0 / fps

                landmarks = tracker.detect(frame, now_ms)
                sampler.update(frame)
                renderer.begin_frame()
                stats = engine.process(landmarks, now_ms, renderer)
                renderer.end_frame()
                writer.write(surface_to_bgr(surface))

                frame_idx += 1
                if frame_idx % REPORT_EVERY == 0:
                    print(f"frame {frame_idx}/{total_frames}: {stats['live']} travelers")

        # flush the encoder before moviepy reads the file
        writer.release()
        print(f"Processed {frame_idx} frames.")

        base, _ = os.path.splitext(os.path.basename(filename))
        out_dir = os.path.dirname(filename) or "."
        output_path = os.path.join(out_dir, f"{base}_flow.mp4")

        source = VideoFileClip(filename)
        rendered = VideoFileClip(silent_path)
        try:
            if source.audio is not None:
                rendered = rendered.with_audio(source.audio)
            rendered.write_videofile(output_path, codec="libx264", audio_codec="aac", fps=fps, logger=None)
        finally:
            rendered.close()
            source.close()
    finally:
        cap.release()
        writer.release()
        if os.path.exists(silent_path):
            os.remove(silent_path)

    print(f"Done. Wrote: {output_path}")
    return output_path


def main(argv=None):
    args = build_parser().parse_args(argv)
    config = config_from_args(args)
    if args.video:
        render_video(args.video, config, pose_model=args.pose_model, model_dir=args.model_dir)
    else:
        run_live(config, camera=args.camera, pose_model=args.pose_model, model_dir=args.model_dir)


if __name__ == "__main__":
    main()
