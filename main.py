#!/usr/bin/env python3
"""
Lumenbox - A Python Monte Carlo Path Tracer

Main entry point for rendering scenes.
"""

import argparse
import sys
import time
from pathlib import Path

from lumenbox.image import to_ldr, write_ppm, save_image
from lumenbox.path_recorder import PathRecorder, export_paths_to_obj
from lumenbox.renderer import Renderer
from lumenbox.scene_parser import SceneParseError, load_scene
from lumenbox.scenes import cornell_box, cornell_camera, cornell_settings


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Lumenbox - A Python Monte Carlo Path Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --width 100 --samples 20 --output cornell.ppm
  python main.py --scene scenes/cornell_box.yaml --output cornell.png
  python main.py --width 60 --samples 10 --output - > cornell.ppm
  python main.py --paths 20 --paths-output cornell_box_paths.obj
        '''
    )

    parser.add_argument('--scene', type=str, default='cornell',
                        help="'cornell' or a YAML/JSON scene file (default: cornell)")
    parser.add_argument('--width', type=int, default=None, help='Image width (default: from scene)')
    parser.add_argument('--samples', type=int, default=None, help='Samples per pixel (default: from scene)')
    parser.add_argument('--depth', type=int, default=None, help='Max bounce depth (default: from scene)')
    parser.add_argument('--threads', type=int, default=None, help='Number of threads (0=auto)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible renders')
    parser.add_argument('--output', type=str, default='output/cornell_box.ppm',
                        help="Output filename, or '-' for PPM on stdout")
    parser.add_argument('--paths', type=int, default=0, help='Number of light paths to record')
    parser.add_argument('--paths-output', type=str, default='cornell_box_paths.obj',
                        help='OBJ file for recorded light paths')

    args = parser.parse_args(argv)

    # Status goes to stderr so a PPM on stdout stays clean
    log = sys.stderr

    print("=" * 60, file=log)
    print("Lumenbox Path Tracer", file=log)
    print("=" * 60, file=log)

    if args.scene == 'cornell':
        settings = cornell_settings()
        world = None
    else:
        try:
            world, camera, settings = load_scene(args.scene)
        except SceneParseError as e:
            print(f"Error: {e}", file=log)
            return 1

    if args.width is not None:
        settings.width = args.width
        settings.height = int(args.width / settings.aspect_ratio)
    if args.samples is not None:
        settings.samples_per_pixel = args.samples
    if args.depth is not None:
        settings.max_depth = args.depth
    if args.threads is not None:
        settings.num_threads = args.threads or settings.num_threads
    if args.seed is not None:
        settings.seed = args.seed

    if world is None:
        world = cornell_box()
        camera = cornell_camera(settings.aspect_ratio)

    print(f"\nRender Settings:", file=log)
    print(f"  Resolution: {settings.width}x{settings.height}", file=log)
    print(f"  Samples: {settings.samples_per_pixel}", file=log)
    print(f"  Max Depth: {settings.max_depth}", file=log)
    print(f"  Threads: {settings.num_threads}", file=log)
    print(f"  Objects in scene: {len(world)}", file=log)

    renderer = Renderer(settings)

    recorder = None
    if args.paths > 0:
        recorder = PathRecorder(args.paths)
        renderer.attach_recorder(recorder)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', file=log, flush=True)

    renderer.set_progress_callback(progress_callback)

    print("\nRendering...", file=log)
    start_time = time.time()

    image = renderer.render(world, camera)

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds", file=log)
    if elapsed > 0:
        rays = settings.width * settings.height * max(settings.samples_per_pixel, 0)
        print(f"  Samples per second: {rays / elapsed:.0f}", file=log)

    status = 0
    if args.output == '-':
        write_ppm(sys.stdout, to_ldr(image))
    else:
        print(f"\nSaving to: {args.output}", file=log)
        try:
            Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            print(f"Warning: Could not create output directory: {e}", file=log)
        if not save_image(image, args.output):
            status = 1

    if recorder is not None:
        print(f"Exporting {len(recorder)} paths to {args.paths_output}...", file=log)
        if export_paths_to_obj(args.paths_output, recorder.paths, scene=world):
            print(f"Successfully exported to {args.paths_output}", file=log)
        else:
            print("Failed to export OBJ file", file=log)

    print("\nDone!", file=log)
    return status


if __name__ == '__main__':
    sys.exit(main())
