# tests/unit/test_core/test_game_manager.py

"""Unit tests for GameManager discovery, editing and launching."""

import json
import shutil
from unittest.mock import MagicMock

import pytest

from playdeck.core.file_system import FileSystemError, NotFoundError
from playdeck.core.game import Game, GameActions
from playdeck.core.game_manager import GameManager, merge_candidates
from playdeck.core.metadata_store import MetadataStore
from playdeck.services.asset_service import AssetDownloadError, AssetService


def _manager(library, file_system, metadata_store=None, asset_service=None, **kwargs):
    return GameManager(
        games_path=str(library),
        extensions=kwargs.pop("extensions", ".exe"),
        exclusions=kwargs.pop("exclusions", "unins"),
        file_system=file_system,
        metadata_store=metadata_store or MetadataStore(file_system),
        asset_service=asset_service or MagicMock(),
        **kwargs,
    )


def _by_name(games):
    return {g.name: g for g in games}


class TestMergeCandidates:
    """Tests for merge_candidates()."""

    def test_deep_first_then_missing_shallow(self):
        """Deep matches come first, shallow ones are appended only if new."""
        assert merge_candidates(["a.exe"], ["bin/b.exe", "a.exe"]) == ["bin/b.exe", "a.exe"]

    def test_no_duplicates(self):
        """Every candidate appears once."""
        assert merge_candidates(["a.exe", "a.exe"], ["a.exe"]) == ["a.exe"]


class TestLoadGames:
    """Tests for GameManager.load_games()."""

    def test_discovers_games_and_skips_non_games(self, library, file_system):
        """Directories with candidates become games, others are skipped."""
        manager = _manager(library, file_system)

        games = manager.load_games()

        by_name = _by_name(games)
        assert set(by_name) == {"Foo", "Bar"}
        assert by_name["Foo"].actions.default == "game.exe"
        assert by_name["Foo"].actions.others == ["bin/tool.exe", "game.exe"]
        assert by_name["Bar"].actions.default == "launcher.exe"
        assert by_name["Bar"].actions.others == ["launcher.exe"]
        assert manager.games is games

    def test_writes_sidecars_only_for_games(self, library, file_system):
        """A sidecar is created for each new game and never for non-games."""
        _manager(library, file_system).load_games()

        foo_sidecar = library / "Foo" / "Playdeck" / "metadata.json"
        data = json.loads(foo_sidecar.read_text(encoding="utf-8"))
        assert data["name"] == "Foo"
        assert data["path"] == f"{library}/Foo"
        assert data["id"]
        assert "images" not in data
        assert not (library / "Docs" / "Playdeck").exists()

    def test_new_game_path_is_root_joined_with_directory(self, library, file_system):
        """A synthesized record points at <root>/<directory>."""
        games = _manager(library, file_system).load_games()
        assert _by_name(games)["Bar"].path == f"{library}/Bar"

    def test_multiple_first_level_candidates_have_no_default(self, tmp_path, file_system):
        """Ambiguous first-level candidates leave the default unset."""
        (tmp_path / "Baz").mkdir()
        (tmp_path / "Baz" / "a.exe").write_bytes(b"")
        (tmp_path / "Baz" / "b.exe").write_bytes(b"")

        games = _manager(tmp_path, file_system).load_games()

        assert len(games) == 1
        assert games[0].actions.default is None
        assert games[0].actions.others == ["a.exe", "b.exe"]

    def test_only_deep_candidates_is_not_a_game(self, tmp_path, file_system):
        """Executables only in subdirectories do not make a game."""
        (tmp_path / "Deep" / "bin").mkdir(parents=True)
        (tmp_path / "Deep" / "bin" / "tool.exe").write_bytes(b"")

        assert _manager(tmp_path, file_system).load_games() == []
        assert not (tmp_path / "Deep" / "Playdeck").exists()

    def test_rediscovery_is_stable(self, library, file_system):
        """A second scan reuses the sidecars instead of minting new ids."""
        first = _by_name(_manager(library, file_system).load_games())
        second = _by_name(_manager(library, file_system).load_games())

        assert {n: g.id for n, g in first.items()} == {n: g.id for n, g in second.items()}
        assert second["Foo"].to_dict() == first["Foo"].to_dict()

    def test_existing_sidecar_is_used_verbatim(self, library, file_system):
        """A non-empty sidecar wins over the directory contents."""
        sidecar = library / "Foo" / "Playdeck" / "metadata.json"
        sidecar.parent.mkdir()
        sidecar.write_text(
            json.dumps(
                {
                    "id": "fixed",
                    "name": "Foo: Director's Cut",
                    "path": str(library / "Foo"),
                    "actions": {"default": "bin/tool.exe", "others": ["bin/tool.exe"]},
                    "description": "Edited",
                }
            ),
            encoding="utf-8",
        )

        manager = _manager(library, file_system)
        manager.load_games()
        foo = manager.get_game("fixed")
        assert foo.name == "Foo: Director's Cut"
        assert foo.actions.default == "bin/tool.exe"
        assert foo.extra["description"] == "Edited"

    def test_corrupt_sidecar_is_regenerated(self, library, file_system):
        """A malformed sidecar is treated like a missing one."""
        sidecar = library / "Bar" / "Playdeck" / "metadata.json"
        sidecar.parent.mkdir()
        sidecar.write_text("{oops", encoding="utf-8")

        games = _by_name(_manager(library, file_system).load_games())

        assert games["Bar"].actions.default == "launcher.exe"
        assert json.loads(sidecar.read_text(encoding="utf-8"))["id"] == games["Bar"].id

    def test_deeply_nested_sidecar_is_regenerated(self, library, file_system):
        """A sidecar too deeply nested to parse is treated like a missing one."""
        sidecar = library / "Bar" / "Playdeck" / "metadata.json"
        sidecar.parent.mkdir()
        sidecar.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")

        games = _by_name(_manager(library, file_system).load_games())

        assert set(games) == {"Foo", "Bar"}
        assert games["Bar"].actions.default == "launcher.exe"
        assert json.loads(sidecar.read_text(encoding="utf-8"))["id"] == games["Bar"].id

    def test_unexpected_error_in_one_directory_is_skipped(self, library, file_system):
        """Any exception from one directory excludes only that directory."""
        store = MagicMock()

        def load(game_path):
            if game_path.endswith("/Foo"):
                raise RuntimeError("unexpected")
            return {}

        store.load.side_effect = load

        games = _manager(library, file_system, metadata_store=store).load_games()

        assert [g.name for g in games] == ["Bar"]

    def test_failure_in_one_directory_does_not_abort_scan(self, library, file_system):
        """A sidecar write error skips that game and keeps the others."""
        store = MagicMock()
        store.load.return_value = {}

        def save(game):
            if game.name == "Foo":
                raise FileSystemError("disk full", game.path)

        store.save.side_effect = save

        games = _manager(library, file_system, metadata_store=store).load_games()

        assert [g.name for g in games] == ["Bar"]

    def test_progress_callback(self, library, file_system):
        """The callback fires once per scanned directory."""
        calls = []
        _manager(library, file_system).load_games(lambda step, current, total: calls.append((step, current, total)))

        assert [c[1] for c in calls] == [1, 2, 3]
        assert all(c[2] == 3 for c in calls)
        assert sorted(c[0] for c in calls) == ["Bar", "Docs", "Foo"]

    def test_missing_root_yields_empty_collection(self, tmp_path, file_system):
        """A library root that does not exist produces no games."""
        manager = _manager(tmp_path / "missing", file_system)
        manager.games = [Game(id="old", name="Old", path="/old")]

        assert manager.load_games() == []
        assert manager.games == []

    def test_empty_games_path(self, file_system):
        """No configured root means no discovery at all."""
        manager = _manager("", file_system)
        assert manager.load_games() == []

    def test_replaces_collection_wholesale(self, library, file_system):
        """Games removed from disk disappear on the next scan."""
        manager = _manager(library, file_system)
        manager.load_games()

        shutil.rmtree(library / "Bar")

        assert [g.name for g in manager.load_games()] == ["Foo"]

    def test_single_worker(self, library, file_system):
        """Discovery works with a pool of one."""
        games = _manager(library, file_system, max_workers=1).load_games()
        assert len(games) == 2


class TestQueries:
    """Tests for games_sorted() and get_game()."""

    def test_games_sorted_case_insensitive(self, file_system):
        """Games sort by name ignoring case."""
        manager = _manager("/g", file_system)
        manager.games = [
            Game(id="1", name="zeta", path="/g/zeta"),
            Game(id="2", name="Alpha", path="/g/Alpha"),
            Game(id="3", name="beta", path="/g/beta"),
        ]
        assert [g.name for g in manager.games_sorted()] == ["Alpha", "beta", "zeta"]

    def test_get_game(self, file_system):
        """Lookup by id returns the game or None."""
        manager = _manager("/g", file_system)
        game = Game(id="1", name="Foo", path="/g/Foo")
        manager.games = [game]
        assert manager.get_game("1") is game
        assert manager.get_game("2") is None


class TestSaveGameMetadata:
    """Tests for GameManager.save_game_metadata()."""

    @pytest.fixture
    def loaded(self, library, file_system):
        asset_service = MagicMock()
        manager = _manager(library, file_system, asset_service=asset_service)
        manager.load_games()
        foo = next(g for g in manager.games if g.name == "Foo")
        return manager, asset_service, foo

    def test_downloads_remote_images_and_saves(self, loaded):
        """Remote URLs are replaced by local paths before the sidecar is written."""
        manager, asset_service, foo = loaded
        asset_service.save_image.side_effect = lambda url, directory, key, game_id: f"{directory}/{key}.png"

        edited = foo.copy()
        edited.name = "Foo Deluxe"
        edited.images = {"icon": "https://cdn.example/icon.png", "logo": "/already/local.png", "header": ""}

        assert manager.save_game_metadata(edited) is True

        asset_service.save_image.assert_called_once_with(
            url="https://cdn.example/icon.png",
            directory=f"{foo.path}/Playdeck",
            key="icon",
            game_id=foo.id,
        )
        saved = manager.get_game(foo.id)
        assert saved.name == "Foo Deluxe"
        assert saved.images == {
            "icon": f"{foo.path}/Playdeck/icon.png",
            "logo": "/already/local.png",
            "header": "",
        }
        on_disk = MetadataStore(manager.file_system).load(foo.path)
        assert on_disk["images"]["icon"] == f"{foo.path}/Playdeck/icon.png"
        assert on_disk["name"] == "Foo Deluxe"

    def test_not_found_image_becomes_empty(self, loaded):
        """An image the server does not have is stored as an empty string."""
        manager, asset_service, foo = loaded
        asset_service.save_image.return_value = None

        edited = foo.copy()
        edited.images = {"icon": "https://cdn.example/missing.png"}

        assert manager.save_game_metadata(edited) is True
        assert manager.get_game(foo.id).images == {"icon": ""}

    def test_download_failure_leaves_everything_untouched(self, loaded):
        """A failed download aborts the edit before anything is written."""
        manager, asset_service, foo = loaded
        asset_service.save_image.side_effect = AssetDownloadError("boom", "https://cdn.example/icon.png", 500)
        before = MetadataStore(manager.file_system).load(foo.path)

        edited = foo.copy()
        edited.name = "Renamed"
        edited.images = {"icon": "https://cdn.example/icon.png"}

        assert manager.save_game_metadata(edited) is False
        assert manager.get_game(foo.id).name == "Foo"
        assert MetadataStore(manager.file_system).load(foo.path) == before
        assert edited.images == {"icon": "https://cdn.example/icon.png"}

    def test_caller_record_is_not_mutated(self, loaded):
        """The game passed in keeps its URLs; the collection gets the resolved copy."""
        manager, asset_service, foo = loaded
        asset_service.save_image.return_value = "/local/icon.png"

        edited = foo.copy()
        edited.images = {"icon": "http://cdn.example/icon.png"}
        manager.save_game_metadata(edited)

        assert edited.images == {"icon": "http://cdn.example/icon.png"}
        assert manager.get_game(foo.id) is not edited

    def test_downloads_run_in_order_and_stop_at_first_failure(self, loaded):
        """Images are fetched one by one in role order; a failure stops the edit."""
        manager, asset_service, foo = loaded
        before = MetadataStore(manager.file_system).load(foo.path)
        requested = []

        def save_image(url, directory, key, game_id):
            requested.append(key)
            if key == "logo":
                raise AssetDownloadError("boom", url, 500)
            return f"{directory}/{key}.png"

        asset_service.save_image.side_effect = save_image

        edited = foo.copy()
        edited.images = {
            "icon": "https://cdn.example/icon.png",
            "logo": "https://cdn.example/logo.png",
            "header": "https://cdn.example/header.jpg",
        }

        assert manager.save_game_metadata(edited) is False
        assert requested == ["icon", "logo"]
        assert MetadataStore(manager.file_system).load(foo.path) == before
        assert manager.get_game(foo.id).to_dict() == foo.to_dict()

    def test_all_roles_downloaded_in_images_order(self, loaded):
        """Every remote role is requested exactly once, in mapping order."""
        manager, asset_service, foo = loaded
        asset_service.save_image.side_effect = lambda url, directory, key, game_id: f"{directory}/{key}.png"

        edited = foo.copy()
        edited.images = {
            "header": "https://cdn.example/header.jpg",
            "icon": "https://cdn.example/icon.png",
            "logo": "https://cdn.example/logo.png",
        }

        assert manager.save_game_metadata(edited) is True
        assert [c.kwargs["key"] for c in asset_service.save_image.call_args_list] == ["header", "icon", "logo"]

    def test_empty_image_body_still_saves(self, library, file_system):
        """A 200 response without content is stored and the edit succeeds."""
        session = MagicMock()
        session.headers = {}
        session.get.return_value = MagicMock(status_code=200, ok=True, content=b"")
        manager = _manager(library, file_system, asset_service=AssetService(file_system, session=session))
        manager.load_games()
        foo = next(g for g in manager.games if g.name == "Foo").copy()
        foo.images = {"icon": "https://cdn.example/empty.png"}

        assert manager.save_game_metadata(foo) is True
        assert manager.get_game(foo.id).images["icon"].endswith(".jpg")

    def test_unserializable_field_reports_failure(self, loaded):
        """A record that cannot be written as JSON is reported as a failed save."""
        manager, _, foo = loaded
        before = MetadataStore(manager.file_system).load(foo.path)

        edited = foo.copy()
        edited.extra["released"] = object()

        assert manager.save_game_metadata(edited) is False
        assert MetadataStore(manager.file_system).load(foo.path) == before
        assert "released" not in manager.get_game(foo.id).extra

    def test_non_string_image_value_reports_failure(self, loaded):
        """A malformed image value is reported as a failed save."""
        manager, _, foo = loaded

        edited = foo.copy()
        edited.images = {"icon": 42}

        assert manager.save_game_metadata(edited) is False
        assert manager.get_game(foo.id).images is None

    def test_game_not_in_collection(self, loaded, tmp_path):
        """A record unknown to the collection is written but reported as failure."""
        manager, _, _ = loaded
        stranger = Game(id="stranger", name="Stranger", path=str(tmp_path / "Stranger"))

        assert manager.save_game_metadata(stranger) is False
        assert MetadataStore(manager.file_system).load(stranger.path)["id"] == "stranger"
        assert manager.get_game("stranger") is None

    def test_sidecar_write_failure(self, library, file_system):
        """A failing sidecar write reports failure."""
        store = MagicMock()
        store.save.side_effect = FileSystemError("read-only", str(library))
        manager = _manager(library, file_system, metadata_store=store)
        game = Game(id="1", name="Foo", path=str(library / "Foo"))
        manager.games = [game]

        assert manager.save_game_metadata(game.copy()) is False


class TestLaunch:
    """Tests for GameManager.launch()."""

    def _game(self):
        return Game(id="1", name="Foo", path="/g/Foo", actions=GameActions("game.exe", ["game.exe", "bin/tool.exe"]))

    def test_launches_default_action(self):
        """Without an explicit action the default executable is opened."""
        fs = MagicMock()
        fs.open_externally.return_value = True
        manager = _manager("/g", fs)

        assert manager.launch(self._game()) is True
        fs.open_externally.assert_called_once_with("/g/Foo/game.exe")

    def test_launches_explicit_action(self):
        """An explicit action overrides the default."""
        fs = MagicMock()
        manager = _manager("/g", fs)

        manager.launch(self._game(), "bin/tool.exe")
        fs.open_externally.assert_called_once_with("/g/Foo/bin/tool.exe")

    def test_no_action_raises(self):
        """A game without a default cannot be launched implicitly."""
        manager = _manager("/g", MagicMock())
        game = Game(id="1", name="Foo", path="/g/Foo")

        with pytest.raises(ValueError):
            manager.launch(game)

    def test_missing_executable_propagates(self):
        """A missing executable surfaces as NotFoundError."""
        fs = MagicMock()
        fs.open_externally.side_effect = NotFoundError("missing", "/g/Foo/game.exe")
        manager = _manager("/g", fs)

        with pytest.raises(NotFoundError):
            manager.launch(self._game())


class TestSampleScenarios:
    """End-to-end discovery scenarios on a real directory tree."""

    def test_single_executable_and_empty_directory(self, tmp_path, file_system):
        """Foo with Foo.exe becomes a game, the empty Bar does not."""
        (tmp_path / "Foo").mkdir()
        (tmp_path / "Foo" / "Foo.exe").write_bytes(b"")
        (tmp_path / "Bar").mkdir()

        manager = _manager(tmp_path, file_system, exclusions="")
        games = manager.load_games()

        assert [g.name for g in games] == ["Foo"]
        assert games[0].actions.default == "Foo.exe"
        assert games[0].actions.others == ["Foo.exe"]
        assert manager.list_game_dirs() == ["Bar", "Foo"]

    def test_uninstaller_is_excluded(self, tmp_path, file_system):
        """With exclusion 'unins' an added uninstaller does not count."""
        (tmp_path / "Foo").mkdir()
        (tmp_path / "Foo" / "Foo.exe").write_bytes(b"")
        (tmp_path / "Foo" / "unins000.exe").write_bytes(b"")

        games = _manager(tmp_path, file_system, exclusions="unins").load_games()

        assert games[0].actions.default == "Foo.exe"
        assert games[0].actions.others == ["Foo.exe"]

    def test_missing_icon_is_saved_as_empty(self, tmp_path, file_system):
        """A 404 icon URL is stored as an empty string and the save succeeds."""
        (tmp_path / "Foo").mkdir()
        (tmp_path / "Foo" / "Foo.exe").write_bytes(b"")

        session = MagicMock()
        session.headers = {}
        session.get.return_value = MagicMock(status_code=404, ok=False)

        manager = _manager(tmp_path, file_system, asset_service=AssetService(file_system, session=session))
        game = manager.load_games()[0].copy()
        game.images = {"icon": "https://cdn.example/missing.ico"}

        assert manager.save_game_metadata(game) is True
        on_disk = json.loads((tmp_path / "Foo" / "Playdeck" / "metadata.json").read_text(encoding="utf-8"))
        assert on_disk["images"] == {"icon": ""}
