from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from course_pacer.contracts.course_contract import CheckpointLabel, CoursePayload
from course_pacer.core.engine import build_course
from course_pacer.core.models import PacingPlan, RoutePoint
from course_pacer.errors import CoursePacerError


def _read_route(path: Path) -> List[RoutePoint]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("points", [])
    return [RoutePoint(**p) for p in data]


def _read_plan(path: Optional[Path]) -> Optional[PacingPlan]:
    if path is None:
        return None
    data = json.loads(path.read_text(encoding="utf-8"))
    return PacingPlan(**data)


def _save_json(path: Path, obj) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2), encoding="utf-8")


def _labels_table(payload: CoursePayload) -> Table:
    table = Table(title=f"Course points — {payload.name}")
    table.add_column("Idx", justify="right")
    table.add_column("Dist km", justify="right")
    table.add_column("Lat")
    table.add_column("Lon")
    table.add_column("Elev m", justify="right")
    table.add_column("Type")
    table.add_column("Label")

    for ap in payload.points:
        if ap.label is None:
            continue
        p = ap.route_point
        table.add_row(
            str(ap.source_index),
            f"{p.distance / 1000.0:.2f}",
            f"{p.latitude:.5f}",
            f"{p.longitude:.5f}",
            f"{p.elevation:.0f}" if p.elevation is not None else "",
            "checkpoint" if isinstance(ap.label, CheckpointLabel) else "power",
            ap.label.text,
        )
    return table


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Build an annotated, device-sized course.")
    ap.add_argument("--route", required=True, help="Route JSON: list of points or {'points': [...]}")
    ap.add_argument("--plan", default=None, help="Pacing plan JSON")
    ap.add_argument("--name", default="", help="Course name")
    ap.add_argument("--activity-type", default=None, help="e.g. ROAD_CYCLING")
    ap.add_argument("--out", default="course.json", help="Where to write the vendor JSON")
    ap.add_argument("--debug", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s [course-pacer] %(levelname)s %(message)s",
    )

    console = Console()
    route_path = Path(args.route)

    try:
        points = _read_route(route_path)
        plan = _read_plan(Path(args.plan) if args.plan else None)
        payload = build_course(
            points,
            pacing_plan=plan,
            course_name=args.name or route_path.stem,
            activity_type=args.activity_type,
        )
    except CoursePacerError as e:
        console.print(f"[red]{e.user_message}[/red] ({escape(str(e))})")
        return 1
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Could not read input:[/red] {escape(str(e))}")
        return 1
    except ValidationError as e:
        console.print(f"[red]Invalid route or plan:[/red] {escape(str(e))}")
        return 1

    console.print(_labels_table(payload))
    console.print(
        f"{payload.total_distance / 1000.0:.2f} km, "
        f"+{payload.elevation_gain:.0f} m / -{payload.elevation_loss:.0f} m, "
        f"{payload.point_count} points from {len(points)} "
        f"({payload.checkpoint_count} checkpoints, {payload.power_label_count} power targets)"
    )

    out = Path(args.out)
    _save_json(out, payload.to_vendor_json())
    console.print(f"Saved: {out.resolve()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
