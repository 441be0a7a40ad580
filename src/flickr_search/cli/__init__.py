"""Command-line front end: search Flickr, download images, manage favourites."""

import argparse
import json
import logging
from pathlib import Path


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Flickr photo search")
    parser.add_argument("--db", help="Favourites DuckDB file (default: project root)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    # search
    s_parser = subparsers.add_parser("search", help="Search Flickr photos by text")
    s_parser.add_argument("term", help="Search term")
    s_parser.add_argument("--json", action="store_true", help="Print results as JSON")

    # download
    dl_parser = subparsers.add_parser("download", help="Search and download the result images")
    dl_parser.add_argument("term", help="Search term")
    dl_parser.add_argument(
        "--size",
        choices=["m", "b"],
        default="m",
        help="Photo size: m=thumbnail (240px), b=large (1024px) (default: m)",
    )
    dl_parser.add_argument("--out", default=".", help="Output directory (default: cwd)")

    # favourite
    fav_parser = subparsers.add_parser("favourite", help="Flag a photo as favourite")
    fav_parser.add_argument("photo_id", help="Flickr photo ID")
    fav_parser.add_argument("--unset", action="store_true", help="Clear the flag instead")

    # favourites
    subparsers.add_parser("favourites", help="List favourite photo IDs")

    args = parser.parse_args(argv)

    from flickr_search.app_logging import configure_logging

    configure_logging(logging.DEBUG if args.verbose else None)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "search":
        return _cmd_search(args)
    if args.command == "download":
        return _cmd_download(args)
    if args.command == "favourite":
        return _cmd_favourite(args)
    if args.command == "favourites":
        return _cmd_favourites(args)
    return 0


def _build_client():
    """Create the Flickr client used by the network commands."""
    from flickr_search.flickr.client import FlickrClient

    return FlickrClient()


def _run_search(client, term: str):
    """Run one search through the callback API and wait for its completion."""
    from flickr_search.flickr.searcher import FlickrSearcher, MainThreadDispatcher

    dispatcher = MainThreadDispatcher()
    outcome: dict = {}

    def on_complete(result, error) -> None:
        outcome["result"] = result
        outcome["error"] = error

    with FlickrSearcher(client, dispatcher) as searcher:
        searcher.search(term, on_complete)
        dispatcher.run_until(lambda: bool(outcome))
    return outcome["result"], outcome["error"]


def _cmd_search(args: argparse.Namespace) -> int:
    """Search and print the matching photos."""
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table

    from flickr_search.db import get_connection
    from flickr_search.errors import describe_error
    from flickr_search.favourites import DuckDBFavouriteStore

    with _build_client() as client:
        result, error = _run_search(client, args.term)
    if error is not None:
        print(f"Error: {describe_error(error)}")
        return 1

    conn = get_connection(args.db)
    store = DuckDBFavouriteStore(conn)
    rows = [
        {
            "photo_id": photo.photo_id,
            "title": photo.title,
            "thumbnail_url": photo.thumbnail_url,
            "favourite": photo.is_favourite(store),
        }
        for photo in result
    ]
    conn.close()

    if args.json:
        print(json.dumps({"term": result.term, "photos": rows}, ensure_ascii=False, indent=2))
        return 0

    table = Table(title=f"Flickr: {escape(result.term)} ({len(rows)} photos)")
    table.add_column("★")
    table.add_column("ID", no_wrap=True)
    table.add_column("Title")
    table.add_column("Thumbnail", no_wrap=True)
    for row in rows:
        table.add_row(
            "★" if row["favourite"] else "",
            escape(row["photo_id"]),
            escape(row["title"]),
            row["thumbnail_url"],
        )
    Console().print(table)
    return 0


def _cmd_download(args: argparse.Namespace) -> int:
    """Search, then fetch every result image and save it as JPEG."""
    from rich.markup import escape
    from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

    from flickr_search.errors import describe_error
    from flickr_search.flickr.searcher import FlickrSearcher, MainThreadDispatcher

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    with _build_client() as client:
        result, error = _run_search(client, args.term)
        if error is not None:
            print(f"Error: {describe_error(error)}")
            return 1
        if not result:
            print(f"No photos found for '{result.term}'.")
            return 0

        dispatcher = MainThreadDispatcher()
        finished: list[str] = []
        failures: list[str] = []

        with (
            FlickrSearcher(client, dispatcher) as searcher,
            Progress(
                SpinnerColumn(),
                TextColumn("[bold blue]{task.description}"),
                BarColumn(),
                TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
                TextColumn("{task.completed}/{task.total}"),
            ) as progress,
        ):
            task = progress.add_task(f"Downloading {escape(result.term)}", total=len(result))

            for index, photo in enumerate(result):
                # Entries without an id still need distinct file names.
                stem = photo.photo_id or f"photo-{index}"
                filename = f"{stem}.jpg"

                def on_image(image, error, photo=photo, filename=filename) -> None:
                    if error is not None:
                        failures.append(f"{photo.photo_id}: {describe_error(error)}")
                    else:
                        image.convert("RGB").save(out_dir / filename, "JPEG")
                    finished.append(photo.photo_id)
                    progress.advance(task)

                searcher.load_image(photo, args.size, on_image)

            dispatcher.run_until(lambda: len(finished) == len(result))

    for failure in failures:
        print(f"  Failed {failure}")
    print(f"Saved {len(finished) - len(failures)} of {len(result)} images to {out_dir}.")
    return 1 if failures else 0


def _cmd_favourite(args: argparse.Namespace) -> int:
    """Set or clear the favourite flag of one photo."""
    from flickr_search.db import get_connection
    from flickr_search.favourites import DuckDBFavouriteStore

    conn = get_connection(args.db)
    DuckDBFavouriteStore(conn).set(args.photo_id, not args.unset)
    conn.close()
    state = "cleared" if args.unset else "set"
    print(f"Favourite {state} for {args.photo_id}.")
    return 0


def _cmd_favourites(args: argparse.Namespace) -> int:
    """List favourite photo IDs."""
    from flickr_search.db import get_connection
    from flickr_search.favourites import DuckDBFavouriteStore

    conn = get_connection(args.db)
    photo_ids = DuckDBFavouriteStore(conn).list_favourites()
    conn.close()
    for photo_id in photo_ids:
        print(f"  {photo_id}")
    if not photo_ids:
        print("No favourites yet.")
    return 0
