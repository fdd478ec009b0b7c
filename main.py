#!/usr/bin/env python3
"""
cityforge - Command Line Entry Point

Generates a city from settings (defaults, a JSON config file and command
line overrides) and writes the requested artifacts: OBJ meshes, native
JSON and a Graphviz dump of the road network.

Exit codes: 0 on success, 1 on invalid settings or a pipeline error,
2 when the generated city fails validation.
"""

import argparse
import logging
import sys
from pathlib import Path

# Ensure package imports work when executed as a script
SRC_DIR = Path(__file__).resolve().parent / "src"
if SRC_DIR.is_dir() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from cityforge.conversion import ObjWriter, save_city_json  # noqa: E402
from cityforge.pipeline import (  # noqa: E402
    CityGenerator,
    CitySettings,
    PipelineError,
    load_settings,
    save_settings,
)
from cityforge.pipeline.debug import export_road_graph_dot  # noqa: E402

logger = logging.getLogger("cityforge")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Procedurally generate a city: roads, blocks, lots and buildings.")
    parser.add_argument("--config", type=Path, help="JSON settings file")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--size", type=float, nargs=2, metavar=("X", "Z"),
                        help="City size along X and Z")
    parser.add_argument("--max-depth", type=int, help="Maximum subdivision depth")
    parser.add_argument("--road-width", type=float, help="Road width")
    parser.add_argument("--node-jitter", type=float, help="Maximum node jitter (0..5)")
    parser.add_argument("--output-dir", type=Path, default=Path("output") / "city",
                        help="Directory for generated files (default: output/city)")
    parser.add_argument("--name", default="city", help="Base name for output files")
    parser.add_argument("--obj", action="store_true", help="Write roads and buildings as OBJ")
    parser.add_argument("--json", action="store_true", help="Write the city layout as JSON")
    parser.add_argument("--dot", action="store_true", help="Write the road graph as Graphviz DOT")
    parser.add_argument("--save-config", type=Path,
                        help="Write the effective settings to this JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def resolve_settings(args: argparse.Namespace) -> CitySettings:
    """Defaults, then the config file, then command line overrides."""
    settings = load_settings(args.config) if args.config else CitySettings()
    if args.seed is not None:
        settings.seed = args.seed
    if args.size is not None:
        settings.city_size_x, settings.city_size_z = args.size
    if args.max_depth is not None:
        settings.max_depth = args.max_depth
    if args.road_width is not None:
        settings.road_width = args.road_width
    if args.node_jitter is not None:
        settings.node_jitter = args.node_jitter
    return settings


def write_outputs(args: argparse.Namespace, result) -> list:
    out_dir: Path = args.output_dir
    written = []
    if not (args.obj or args.json or args.dot):
        return written
    out_dir.mkdir(parents=True, exist_ok=True)

    if args.obj:
        obj_path = out_dir / f"{args.name}.obj"
        writer = ObjWriter()
        writer.add_mesh("roads", result.road_mesh, "road")
        writer.add_mesh("buildings", result.building_mesh, "building")
        writer.write(str(obj_path))
        logger.info("OBJ written: %s (%d verts, %d faces)",
                    obj_path, writer.vertex_count, writer.face_count)
        written.append(obj_path)

    if args.json:
        written.append(save_city_json(result.layout, out_dir / f"{args.name}.json"))

    if args.dot:
        dot_path = out_dir / f"{args.name}_roads.dot"
        with open(dot_path, 'w', encoding='utf-8') as f:
            f.write(export_road_graph_dot(result.layout))
        written.append(dot_path)

    return written


def print_summary(result, written):
    m = result.metrics
    print(f"Seed:      {m['seed']}")
    print(f"Nodes:     {m['node_count']}")
    print(f"Segments:  {m['segment_count']}")
    print(f"Blocks:    {m['block_count']} ({m.get('blocks_skipped', 0)} skipped)")
    print(f"Lots:      {m.get('lot_count', 0)}")
    print(f"Buildings: {m.get('building_count', 0)}")
    print(f"Time:      {result.total_time:.2f}s")
    for warning in result.warnings:
        print(f"Warning:   {warning}")
    if result.validation is not None and result.validation.issues:
        print(result.validation.report())
    for path in written:
        print(f"Wrote {path}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = resolve_settings(args)
        if args.save_config:
            save_settings(settings, args.save_config)
            logger.info("Settings written: %s", args.save_config)
        result = CityGenerator(settings).generate()
    except PipelineError as e:
        logger.error("%s", e)
        return 1

    written = write_outputs(args, result)
    print_summary(result, written)

    if result.validation is not None and result.validation.failed:
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
