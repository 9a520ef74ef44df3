"""
heatmap3d - Basic Workflow Showcase

This showcase walks through the data manager behind a 3D heatmap, from
loading grids to sampling a cell.

Key Features Demonstrated:
1. Config-Driven Demo Data - sample_data.yaml maps files to roles
2. Lazy Statistics - min/max/range per variable, NaN skipped
3. Role Mapping - Height / Top Color / Side Color slots
4. Consistency Gate - nothing is drawn until the mapping is ready
5. Point Sampling - one cell across all three roles
6. xarray Export - the mapped grids as one Dataset

Run: python showcase/01_basic_workflow.py
"""

import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from heatmap3d import HeatmapSession, Role
from heatmap3d.core.errors import ConsistencyError, OutOfRangeError
from heatmap3d.core.session import SessionListener


# ============================================================================
#  HELPER FUNCTIONS
# ============================================================================

def print_section(title, section_num=None):
    """Print a clear section header."""
    print("\n" + "=" * 78)
    if section_num is not None:
        print(f"  SECTION {section_num}: {title}")
    else:
        print(f"  {title}")
    print("=" * 78 + "\n")


class PrintingListener(SessionListener):
    """Stand-in for the UI: prints each notification."""

    def refresh(self):
        print("  [listener] refresh()")

    def redraw(self):
        print("  [listener] redraw()")


def main():
    logging.basicConfig(level=logging.WARNING, format='%(levelname)s %(name)s: %(message)s')

    with HeatmapSession(config_path=str(project_root / 'config'),
                        listener=PrintingListener()) as session:

        # ====================================================================
        print_section("Load and map the demo data", 1)
        # ====================================================================
        loaded = session.load_and_map_sample_data()
        for variable in loaded:
            print(f"  {variable!r}")

        print(f"\n  Roles: {session.role_map.assignments()}")
        print(f"  Color tables: {session.color_table_ids}")
        print(f"  Grid: {session.rows} x {session.cols}")

        # ====================================================================
        print_section("Statistics", 2)
        # ====================================================================
        for variable in session.registry:
            stats = variable.statistics()
            print(f"  {variable.label:<14} min={stats.min_value:8.4f} "
                  f"max={stats.max_value:8.4f} range={stats.range:8.4f}")

        # ====================================================================
        print_section("Consistency gate", 3)
        # ====================================================================
        session.prepare_and_verify()
        print("  Mapping is ready to draw")

        print("\n  Removing the Side Color variable...")
        side = session.role_map.get(Role.SIDE_COLOR)
        session.remove(side)
        try:
            session.prepare_and_verify()
        except ConsistencyError as e:
            print(f"  Not ready: [{e.reason}] {e}")

        print("\n  Re-adding it and mapping it back...")
        session.add(side)
        session.assign(Role.SIDE_COLOR, side)
        session.prepare_and_verify()
        print("  Ready again")

        # ====================================================================
        print_section("Point sampling", 4)
        # ====================================================================
        sample = session.sampler.sample_at(8, 11)
        print(f"  {sample}")

        try:
            session.sampler.sample_at(session.rows, 0)
        except OutOfRangeError as e:
            print(f"  {e}")

        # ====================================================================
        print_section("xarray export", 5)
        # ====================================================================
        print(session.to_dataset())

        # ====================================================================
        print_section("Debug dump", 6)
        # ====================================================================
        logging.getLogger('heatmap3d.core.session').setLevel(logging.INFO)
        session.debug_dump(verbose=True)


if __name__ == '__main__':
    main()
