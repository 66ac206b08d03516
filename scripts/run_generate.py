from pathlib import Path
import sys

# Ensure project root on sys.path for direct script execution
root = Path(__file__).resolve().parents[1]
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

from ttgrid.cli.main import run_pipeline
from ttgrid.data.filters import ViewState
from ttgrid.validate.report import format_validation_report


def main() -> None:
    # Offline render of the bundled scheduler response, all documents included.
    run = run_pipeline(
        root,
        ViewState("sample"),
        source=root / "data" / "sample_response.json",
        export=True,
    )
    print(format_validation_report(run.report))
    print(run.html_path)
    for path in run.export.paths.values():
        print(path)


if __name__ == "__main__":
    main()
