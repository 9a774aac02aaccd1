from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path
from typing import Callable, List, Optional

from specdev.artifacts.repository import ArtifactRepository
from specdev.config import BACKEND_KINDS, PipelineConfig
from specdev.detector import next_stage
from specdev.errors import PipelineError
from specdev.pipeline import Orchestrator, StageReport, backend_for
from specdev.scaffold import create_project, validate_project_name
from specdev.stages import REQUIRED_FIELD, Stage

InputFn = Callable[[str], str]

USAGE = """Spec-Driven Development Tool
A terminal-based solution for LLM-assisted spec-driven development

Usage: spec-dev [options] <command>

Commands:
  new             Start a new project (interactive setup)
  requirements    Generate requirements document for current project
  design          Generate design document from requirements
  implementation  Generate implementation plan from design
  help            Show this help message

Workflow:
  1. Run 'spec-dev new' to create a new project directory and requirements form
  2. Fill out the requirements form with your project details
  3. Run 'spec-dev requirements' to generate the requirements document
  4. Run 'spec-dev design' to generate the design document
  5. Run 'spec-dev implementation' to generate the implementation plan

Interactive Mode:
  Run 'spec-dev' without arguments for step detection and an interactive prompt
"""

STEP_NAMES = {
    Stage.INTAKE: "New Project",
    Stage.REQUIREMENTS: "Generate Requirements",
    Stage.DESIGN: "Generate Design",
    Stage.IMPLEMENTATION: "Generate Implementation",
}

MENU = """Select an option:
  r - Generate requirements    (create requirements from form)
  d - Generate design          (create design from requirements)
  i - Generate implementation  (create implementation from design)
  n - New project              (create new project structure)
  h - Show help                (display help information)
  q - Quit                     (exit the tool)
"""

MENU_COMMANDS = {
    "r": "requirements",
    "d": "design",
    "i": "implementation",
    "n": "new",
    "h": "help",
    "q": "quit",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="spec-dev", description="Spec-Driven Development Tool")
    parser.add_argument("--project-dir", default=".", help="Project directory (default: current directory)")
    parser.add_argument("--templates-dir", help="Directory holding the prompt templates")
    parser.add_argument("--backend", choices=BACKEND_KINDS, help="Generation backend (default: SPECDEV_BACKEND or command)")
    commands = parser.add_subparsers(dest="command")

    new = commands.add_parser("new", help="Start a new project")
    new.add_argument("name", nargs="?", help="Project name")
    new.add_argument("--path", help="Project directory path (default: ./<name>)")
    new.add_argument("--force", action="store_true", help="Do not ask before reusing an existing directory")

    for stage in (Stage.REQUIREMENTS, Stage.DESIGN, Stage.IMPLEMENTATION):
        commands.add_parser(stage.spec.command, help=f"Generate the {stage.spec.label}")
    commands.add_parser("help", help="Show this help message")
    return parser


def _error(message: str, details: Optional[List[str]] = None) -> None:
    print(f"[ERROR] {message}", file=sys.stderr)
    if details:
        print("", file=sys.stderr)
        for line in details:
            print(line, file=sys.stderr)


def _ask(input_fn: InputFn, prompt: str, default: str = "") -> Optional[str]:
    """Prompt for a value; None means the input stream is closed."""
    suffix = f" [{default}]" if default else ""
    try:
        answer = input_fn(f"{prompt}{suffix}: ").strip()
    except EOFError:
        return None
    return answer or default


def print_report(report: StageReport) -> None:
    label = report.stage.spec.label
    print(f"[pipeline] {label[0].upper()}{label[1:]} generated successfully!")
    print()
    print(f"Output file: {report.artifact}")
    print(f"Document stats: {report.line_count} lines, {report.word_count} words")
    print()
    print(f"Preview (first {len(report.preview)} lines):")
    print("-" * 40)
    for line in report.preview:
        print(line)
    print("-" * 40)
    for warning in report.warnings:
        print(f"[WARNING] {warning}", file=sys.stderr)
    if report.warnings:
        print(
            "[WARNING] You may want to review the output and check if the LLM response was complete",
            file=sys.stderr,
        )


def run_stage(config: PipelineConfig, stage: Stage) -> int:
    print(f"=== {stage.spec.label.title()} Generation ===")
    print()
    try:
        orchestrator = Orchestrator(config, backend_for(config))
        report = orchestrator.run(stage)
    except PipelineError as exc:
        details = list(exc.remediation)
        diagnostics = getattr(exc, "diagnostics", "")
        if diagnostics:
            details = ["Error details:", diagnostics.rstrip(), ""] + details
        _error(exc.message, details)
        return 1
    print_report(report)
    return 0


def create_new_project(
    config: PipelineConfig,
    name: Optional[str],
    path: Optional[str],
    force: bool,
    input_fn: InputFn,
) -> int:
    print("=== New Project Setup ===")
    print()
    from_args = name is not None
    while True:
        if name is None:
            name = _ask(input_fn, "Enter project name")
            if name is None:
                print("[scaffold] Project setup cancelled")
                return 1
        problem = validate_project_name(name)
        if problem is None:
            break
        _error(problem)
        if from_args:
            return 1
        name = None

    raw_path = path or _ask(input_fn, "Enter project directory path", f"./{name}")
    if raw_path is None:
        print("[scaffold] Project setup cancelled")
        return 1
    project_dir = Path(raw_path).expanduser()
    if not project_dir.is_absolute():
        project_dir = config.project_root / project_dir
    project_dir = project_dir.resolve()

    if project_dir.is_dir() and not force:
        print(f"[WARNING] Directory already exists: {project_dir}")
        print()
        print("This tool will add the following to the existing directory:")
        print(f"  - A '{config.specs_dirname}' subdirectory (if it doesn't already exist)")
        print(f"  - A requirements form at: {config.specs_dirname}/{config.intake_filename}")
        print("    (This will overwrite any existing requirements form)")
        print()
        if (_ask(input_fn, "Continue anyway? (y/N)") or "").lower() != "y":
            print("[scaffold] Project setup cancelled")
            return 0

    try:
        form_path = create_project(
            project_dir,
            config.templates_root,
            config.specs_dirname,
            config.intake_filename,
        )
    except PipelineError as exc:
        _error(exc.message, exc.remediation)
        return 1

    print()
    print(f"Project: {name}")
    print(f"Location: {project_dir}")
    print()
    print("Next steps:")
    print(f"  1. Fill out the requirements form: {form_path}")
    print(f"  2. Generate requirements: cd '{project_dir}' && spec-dev requirements")
    print()

    if (_ask(input_fn, "Continue to requirements generation now? (y/N)") or "").lower() != "y":
        print("[scaffold] Project setup complete.")
        print(f"When ready, run: cd '{project_dir}' && spec-dev requirements")
        return 0
    print()
    print("[scaffold] Switching to project directory and generating requirements...")
    return run_stage(dataclasses.replace(config, project_root=project_dir), Stage.REQUIREMENTS)


def interactive(config: PipelineConfig, input_fn: InputFn) -> int:
    repository = ArtifactRepository(config.specs_dir, config.intake_filename)
    snapshot = repository.snapshot()
    detected = next_stage(snapshot)
    default = detected.spec.command[0]

    print("=== Spec-Driven Development Tool ===")
    print()
    print(f"[INFO] Detected next logical step: {STEP_NAMES[detected]}")
    if snapshot.intake_present and not snapshot.intake_complete:
        print(
            f"[INFO] Fill in the {REQUIRED_FIELD} field of {repository.intake_path()} "
            "before generating requirements."
        )
    print()
    print(MENU)

    while True:
        try:
            choice = input_fn(f"Choose an option [{default}]: ").strip().lower()
        except EOFError:
            choice = "q"
        command = MENU_COMMANDS.get(choice or default)
        if command is not None:
            break
        _error(f"Invalid option: {choice}")

    if command == "quit":
        print("[INFO] Goodbye!")
        return 0
    if command == "help":
        print(USAGE)
        return 0
    if command == "new":
        return create_new_project(config, None, None, False, input_fn)
    return run_stage(config, Stage.from_command(command))


def main(argv: Optional[List[str]] = None, input_fn: InputFn = input) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "help":
        print(USAGE)
        return 0

    project_root = Path(args.project_dir).expanduser().resolve()
    templates_root = Path(args.templates_dir).expanduser().resolve() if args.templates_dir else None
    try:
        config = PipelineConfig.from_env(project_root, templates_root, args.backend)
    except ValueError as exc:
        parser.error(str(exc))

    if args.command is None:
        return interactive(config, input_fn)
    if args.command == "new":
        return create_new_project(config, args.name, args.path, args.force, input_fn)
    return run_stage(config, Stage.from_command(args.command))


if __name__ == "__main__":
    raise SystemExit(main())
