#!/usr/bin/env python3
"""CLI interface for kgscope - knowledge graph explorer"""
import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import ExplorerConfig, configure_logging, load_data, load_env_file
from .graph.filters import ALL, DOMAIN_MODULES, check_class, class_options, instance_options, module_options
from .graph.guided_tasks import task_options
from .graph.visualization import GraphVisualizer
from .pipeline import PipelineInput, run_pipeline

logger = logging.getLogger(__name__)

FORMATS = ("json", "d3", "mermaid", "html")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kgscope",
        description="kgscope - filter, lay out and check a small knowledge graph",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  kgscope render --level 2 --node-limit 8 -o outputs/graph.json
  kgscope render --module Employment --format mermaid
  kgscope render --level 2 --query ali --format html -o outputs/graph.html
  kgscope options --class Person
  kgscope serve --port 8000
        """
    )
    parser.add_argument(
        "--dataset",
        type=str,
        default=None,
        help="JSON dataset file with 'triples' (and optional 'constraints'). Default: KGSCOPE_DATASET or built-in sample"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: KGSCOPE_LOG_LEVEL or INFO)"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Run the pipeline once and write the result")
    render.add_argument("--module", default=ALL, choices=list(DOMAIN_MODULES), help="Domain module filter")
    render.add_argument("--class", dest="class_name", default=ALL, help="Class filter")
    render.add_argument("--instance", default=ALL, help="Instance filter (requires --class)")
    render.add_argument("--query", default="", help="Search query (highlights matches and their neighbours)")
    render.add_argument("--level", type=int, choices=[1, 2], default=None, help="Semantic level: 1 classes, 2 entities")
    render.add_argument("--node-limit", type=_positive_int, default=None, help="Entity display limit at level 2")
    render.add_argument("--task", type=int, default=None, help="Guided task index (see 'kgscope options')")
    render.add_argument("--include-type-edges", action="store_true", help="Show 'type' edges at level 2")
    render.add_argument("--format", choices=FORMATS, default="json", help="Output format (default: json)")
    render.add_argument("-o", "--output", default="-", help="Output file (default: stdout)")

    options = sub.add_parser("options", help="List modules, classes, instances and guided tasks")
    options.add_argument("--class", dest="class_name", default=ALL, help="List instances of this class")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind host (default: KGSCOPE_HOST or 127.0.0.1)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default: KGSCOPE_PORT or 8000)")
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload (development)")

    return parser


def _render(args, config: ExplorerConfig, store, constraints) -> str:
    check_class(store, args.class_name)
    inputs = PipelineInput(
        module=args.module,
        class_name=args.class_name,
        instance=args.instance,
        query=args.query,
        level=args.level if args.level is not None else config.level,
        node_limit=args.node_limit if args.node_limit is not None else config.node_limit,
        task=args.task,
        include_type_edges=args.include_type_edges,
    )
    model = run_pipeline(store, constraints, inputs, config.canvas)
    logger.info(f"Rendered level {inputs.level}: {len(model.nodes)} nodes, {len(model.edges)} edges")
    visualizer = GraphVisualizer(model, constraints)
    if args.format == "d3":
        return json.dumps(visualizer.to_d3_json(), indent=2, ensure_ascii=False)
    if args.format == "mermaid":
        return visualizer.to_mermaid()
    if args.format == "html":
        return visualizer.to_pyvis_html()
    return model.to_json()


def _options(args, store) -> str:
    check_class(store, args.class_name)
    data = {
        "modules": module_options(),
        "classes": class_options(store),
        "instances": instance_options(store, args.class_name),
        "tasks": task_options(),
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


def _write(text: str, output: str) -> None:
    if output == "-":
        print(text)
        return
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    print(f"Output written to: {path}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    # Load local .env if present
    load_env_file(".env", override=False)

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = ExplorerConfig.from_env()
        if args.dataset:
            config = dataclasses.replace(config, dataset=args.dataset)
        configure_logging(args.log_level or config.log_level)
        store, constraints = load_data(config)

        if args.command == "render":
            _write(_render(args, config, store, constraints), args.output)
        elif args.command == "options":
            _write(_options(args, store), "-")
        elif args.command == "serve":
            from .api import KGScopeServer
            KGScopeServer(store, constraints, config).run(host=args.host, port=args.port, reload=args.reload)
    except (FileNotFoundError, ValueError, ImportError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
