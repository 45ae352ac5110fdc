from __future__ import annotations

from functools import partial
from pathlib import Path

import typer
from rich import print

from route360.config import ProjectConfig, ensure_dirs, load_config
from route360.io import centroids as centroids_io
from route360.io.geocode import search_places
from route360.iso import format_label, normalize
from route360.models import Place, Source
from route360.pipeline.markers import markers_frame, trip_location_markers
from route360.session import GlobeSession
from route360.storage import load_display_name, save_display_name
from route360.viz.figures import plot_globe_markers, plot_trip_map


app = typer.Typer(add_completion=False, help="Travel journal globe: visited countries, trips and markers.")

CONFIG_OPTION = typer.Option(Path("config/project.yml"), exists=True)


def _open_session(cfg: ProjectConfig, *, live_centroids: bool = False) -> GlobeSession:
    loader = None
    if live_centroids and cfg.centroids.enabled:
        loader = partial(
            centroids_io.load_centroids,
            cfg.centroids.topology_url,
            names_url=cfg.centroids.names_url,
            timeout=cfg.centroids.timeout,
            cache_path=cfg.centroids.cache_path,
        )
    return GlobeSession(cfg.open_store(), cfg.scope, centroid_loader=loader)


@app.command()
def sync(config: Path = CONFIG_OPTION) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    with _open_session(cfg) as session:
        visited = session.visited
    manual = sum(1 for v in visited if v.source is Source.MANUAL)
    print(f"[green]Synced[/green] {len(visited)} countries ({manual} manual, {len(visited) - manual} from trips)")


@app.command()
def countries(config: Path = CONFIG_OPTION) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    with _open_session(cfg) as session:
        visited = session.visited
    if not visited:
        print("[yellow]No visited countries yet.[/yellow] Countries come from trip titles like 'Japan Trip'.")
        return
    for v in visited:
        print(f"{format_label(v.name)}  [dim]{v.source.value}[/dim]")
    print(f"[bold]{len(visited)}[/bold] countries visited")


@app.command()
def add_country(name: str, config: Path = CONFIG_OPTION) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    with _open_session(cfg) as session:
        added = session.add_country(name)
    if added:
        print(f"[green]Added[/green] {format_label(name.strip())}")
    else:
        print(f"[yellow]Skip[/yellow] '{name}' is empty or already visited")


@app.command()
def remove_country(name: str, config: Path = CONFIG_OPTION) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    with _open_session(cfg) as session:
        removed = session.remove_country(name)
        still_there = any(normalize(v.name) == normalize(name) for v in session.visited)
    if not removed:
        print(f"[yellow]Skip[/yellow] '{name}' is not in the visited list")
    elif still_there:
        print(f"[yellow]Removed[/yellow] '{name}', but a trip still mentions it so it is back as a trip country")
    else:
        print(f"[green]Removed[/green] {name}")


@app.command()
def markers(
    config: Path = CONFIG_OPTION,
    live: bool = typer.Option(True, help="Wait for live centroids before resolving."),
    out: Path | None = typer.Option(None, help="Write markers to this CSV file."),
) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    with _open_session(cfg, live_centroids=live) as session:
        loaded = session.wait_for_centroids(timeout=cfg.centroids.timeout * 2) if live else ()
        points = session.markers()
        n_visited = len(session.visited)
    df = markers_frame(points)
    if out is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out, index=False)
        print(f"[green]Wrote[/green] {out} ({len(df):,} rows)")
    else:
        for row in df.itertuples(index=False):
            print(f"{row.label}  {row.lat:.2f}, {row.lng:.2f}")
    print(f"markers: {len(points)} of {n_visited} visited ({len(loaded)} live centroids)")


@app.command()
def plot_globe(
    config: Path = CONFIG_OPTION,
    live: bool = typer.Option(True, help="Wait for live centroids before resolving."),
    center_lat: float = 20.0,
    center_lng: float = 0.0,
) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    with _open_session(cfg, live_centroids=live) as session:
        if live:
            session.wait_for_centroids(timeout=cfg.centroids.timeout * 2)
        points = session.markers()
    out = cfg.paths.reports_figures / f"globe_{cfg.user_id}.png"
    drawn = plot_globe_markers(points, outpath=out, center=(center_lat, center_lng))
    print(f"[green]Wrote[/green] {out} ({drawn} markers in view)")


@app.command()
def trips(config: Path = CONFIG_OPTION) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    with _open_session(cfg) as session:
        all_trips = session.trip_repo.trips()
    if not all_trips:
        print("[yellow]No trips yet.[/yellow]")
        return
    for t in all_trips:
        dates = " to ".join(d for d in (t.start, t.end) if d)
        print(f"[bold]{t.id}[/bold]  {t.title}  [dim]{dates}[/dim]")
        for it in t.itinerary:
            day = f"day {it.day}" if it.day else (it.date or "")
            print(f"    item {it.id}  {it.title}  [dim]{day}[/dim]")
        for loc in t.locations:
            print(f"    location {loc.id}  {loc.title}")


@app.command()
def add_trip(
    title: str,
    config: Path = CONFIG_OPTION,
    desc: str = "",
    start: str = "",
    end: str = "",
    country: str | None = None,
) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    with _open_session(cfg) as session:
        trip = session.add_trip(title, desc=desc, start=start, end=end, country=country)
        n_visited = len(session.visited)
    print(f"[green]Added trip[/green] {trip.id} '{trip.title}' ({n_visited} countries visited)")


@app.command()
def delete_trip(trip_id: str, config: Path = CONFIG_OPTION) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    with _open_session(cfg) as session:
        session.delete_trip(trip_id)
        n_visited = len(session.visited)
    print(f"[green]Deleted trip[/green] {trip_id} ({n_visited} countries visited)")


@app.command()
def update_trip(
    trip_id: str,
    config: Path = CONFIG_OPTION,
    title: str | None = None,
    desc: str | None = None,
    start: str | None = None,
    end: str | None = None,
    country: str | None = None,
) -> None:
    fields = {k: v for k, v in dict(title=title, desc=desc, start=start, end=end, country=country).items() if v is not None}
    if not fields:
        raise typer.BadParameter("nothing to update")
    cfg = load_config(config)
    ensure_dirs(cfg)
    with _open_session(cfg) as session:
        trip = session.update_trip(trip_id, **fields)
        n_visited = len(session.visited)
    print(f"[green]Updated trip[/green] {trip.id} '{trip.title}' ({n_visited} countries visited)")


def _pick_place(cfg: ProjectConfig, query: str, pick: int) -> Place:
    places = search_places(query, limit=cfg.geocoder.limit, api_url=cfg.geocoder.url)
    if not places:
        print(f"[yellow]No places found for[/yellow] '{query}'")
        raise typer.Exit(code=1)
    if not 0 <= pick < len(places):
        raise typer.BadParameter(f"pick must be between 0 and {len(places) - 1}")
    return places[pick]


PICK_OPTION = typer.Option(0, help="Index of the search result to attach.")


@app.command()
def add_location(trip_id: str, query: str, config: Path = CONFIG_OPTION, pick: int = PICK_OPTION) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    place = _pick_place(cfg, query, pick)
    with _open_session(cfg) as session:
        loc = session.trip_repo.add_location(trip_id, place)
    print(f"[green]Added location[/green] {loc.id} {loc.title} ({loc.lat:.4f}, {loc.lng:.4f})")


@app.command()
def rename_location(trip_id: str, loc_id: str, title: str, config: Path = CONFIG_OPTION) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    with _open_session(cfg) as session:
        loc = session.trip_repo.rename_location(trip_id, loc_id, title)
    print(f"[green]Renamed location[/green] {loc.id} to '{loc.title}'")


@app.command()
def remove_location(trip_id: str, loc_id: str, config: Path = CONFIG_OPTION) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    with _open_session(cfg) as session:
        session.trip_repo.remove_location(trip_id, loc_id)
    print(f"[green]Removed location[/green] {loc_id}")


@app.command()
def add_item(
    trip_id: str,
    title: str,
    config: Path = CONFIG_OPTION,
    when: str = typer.Option("", "--date", help="ISO date of the activity."),
    note: str = "",
) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    with _open_session(cfg) as session:
        item = session.trip_repo.add_itinerary_item(trip_id, title=title, when=when, note=note)
    day = f" (day {item.day})" if item.day else ""
    print(f"[green]Added item[/green] {item.id} '{item.title}'{day}")


@app.command()
def update_item(
    trip_id: str,
    item_id: str,
    title: str,
    config: Path = CONFIG_OPTION,
    when: str = typer.Option("", "--date", help="ISO date of the activity."),
    note: str = "",
) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    with _open_session(cfg) as session:
        item = session.trip_repo.update_itinerary_item(trip_id, item_id, title=title, when=when, note=note)
    print(f"[green]Updated item[/green] {item.id} '{item.title}' (day {item.day})")


@app.command()
def delete_item(trip_id: str, item_id: str, config: Path = CONFIG_OPTION) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    with _open_session(cfg) as session:
        session.trip_repo.delete_itinerary_item(trip_id, item_id)
    print(f"[green]Deleted item[/green] {item_id}")


@app.command()
def item_location(
    trip_id: str, item_id: str, query: str, config: Path = CONFIG_OPTION, pick: int = PICK_OPTION
) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    place = _pick_place(cfg, query, pick)
    with _open_session(cfg) as session:
        item = session.trip_repo.set_itinerary_location(trip_id, item_id, place)
    print(f"[green]Located item[/green] {item.id} at {item.location} ({item.lat:.4f}, {item.lng:.4f})")


@app.command()
def whoami(config: Path = CONFIG_OPTION) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    name = load_display_name(cfg.open_store(), cfg.scope, fallback=cfg.user_name)
    print(f"Welcome back, [bold]{name}[/bold]!")


@app.command()
def set_name(name: str, config: Path = CONFIG_OPTION) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    if not save_display_name(cfg.open_store(), cfg.scope, name):
        print("[yellow]Skip[/yellow] display name is empty")
        return
    print(f"[green]Display name set[/green] {name.strip()}")


@app.command()
def geocode(query: str, config: Path = CONFIG_OPTION) -> None:
    cfg = load_config(config)
    places = search_places(query, limit=cfg.geocoder.limit, api_url=cfg.geocoder.url)
    if not places:
        print(f"[yellow]No places found for[/yellow] '{query}'")
        return
    for idx, p in enumerate(places):
        print(f"[bold]{idx}[/bold]  {p.label}  [dim]{p.lat:.4f}, {p.lng:.4f}[/dim]")


@app.command()
def plot_trip(trip_id: str, config: Path = CONFIG_OPTION) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    with _open_session(cfg) as session:
        trip = session.trip_repo.get(trip_id)
    pins = trip_location_markers(trip)
    out = cfg.paths.reports_figures / f"trip_{trip_id}.png"
    plot_trip_map(pins, outpath=out, title=trip.title or "Trip map")
    print(f"[green]Wrote[/green] {out} ({len(pins)} pins)")


@app.command()
def fetch_centroids(config: Path = CONFIG_OPTION, force: bool = False) -> None:
    cfg = load_config(config)
    ensure_dirs(cfg)
    out = cfg.centroids.cache_path
    if out is None:
        raise typer.BadParameter("centroids.cache_path is not set in the config")
    if out.exists() and not force:
        print(f"[yellow]Skip[/yellow] centroid fetch; exists: {out}")
        return
    centroids = centroids_io.fetch_centroids(
        cfg.centroids.topology_url, names_url=cfg.centroids.names_url, timeout=cfg.centroids.timeout
    )
    centroids_io.write_centroid_cache(out, centroids)
    print(f"[green]Wrote[/green] {out} ({len(centroids):,} centroids)")


if __name__ == "__main__":
    app()
