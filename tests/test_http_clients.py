"""
Tests for the aiohttp webhook clients and the Supabase (PostgREST) stores.

Both run against a local aiohttp test server.
"""
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from content_scheduler.core.exceptions import DispatchFailedError, StoreReadError, StoreWriteError
from content_scheduler.models import PublicationPayload, PublicationStatus
from content_scheduler.services.webhooks import PublishWebhookClient, ProspectionWebhookClient
from content_scheduler.store.supabase import SupabaseClient, SupabaseScheduleStore, SupabaseProspectStore


class FakeBackend:
    """Webhook endpoints plus a tiny PostgREST table emulation."""

    def __init__(self):
        self.requests = []
        self.webhook_status = 200
        self.webhook_text = "connecté\n"
        self.rows = {
            "1": {"id": 1, "nom": "Lancement", "statut": "Planifiée", "date_brute": "2026-11-02",
                  "platformes": "LinkedIn", "images": [{"url": "a", "vote": None}]},
            "2": {"id": 2, "nom": "Archive", "statut": "Publiée", "date_brute": "2026-09-01"},
        }
        self.fail_table = False

    def app(self):
        app = web.Application()
        app.router.add_post("/hook", self.hook)
        app.router.add_get("/rest/v1/{table}", self.select)
        app.router.add_patch("/rest/v1/{table}", self.update)
        return app

    async def hook(self, request):
        self.requests.append(("POST", dict(request.query), await request.json(), request.headers.copy()))
        return web.Response(status=self.webhook_status, text=self.webhook_text)

    def _matching(self, request):
        rows = list(self.rows.values())
        for key, value in request.query.items():
            if key in ("select", "order"):
                continue
            op, _, arg = value.partition(".")
            if op == "eq":
                rows = [r for r in rows if str(r.get(key)) == arg]
            elif op == "not" and arg == "is.null":
                rows = [r for r in rows if r.get(key) is not None]
        return rows

    async def select(self, request):
        self.requests.append(("GET", list(request.query.items()), None, request.headers.copy()))
        if self.fail_table:
            return web.json_response({"message": "boom"}, status=500)
        return web.json_response(self._matching(request))

    async def update(self, request):
        body = await request.json()
        self.requests.append(("PATCH", list(request.query.items()), body, request.headers.copy()))
        if self.fail_table:
            return web.json_response({"message": "boom"}, status=500)
        rows = self._matching(request)
        for row in rows:
            row.update(body)
        return web.json_response(rows)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest_asyncio.fixture
async def server(backend):
    server = TestServer(backend.app())
    await server.start_server()
    yield server
    await server.close()


class TestPublishWebhookClient:
    @pytest.mark.asyncio
    async def test_posts_publication_body(self, server, backend):
        payload = PublicationPayload(
            title="Lancement",
            platforms=("LinkedIn", "Instagram"),
            description="Texte",
            extra_info="Lien en bio",
        )

        async with PublishWebhookClient(str(server.make_url("/hook"))) as client:
            await client.publish(payload, ["a", "b"])

        _, _, body, _ = backend.requests[0]
        assert body == {
            "nom": "Lancement",
            "images": ["a", "b"],
            "description": "Texte",
            "informations": "Lien en bio",
            "plateformes": ["LinkedIn", "Instagram"],
        }

    @pytest.mark.asyncio
    async def test_non_success_status_raises(self, server, backend):
        backend.webhook_status = 500

        async with PublishWebhookClient(str(server.make_url("/hook"))) as client:
            with pytest.raises(DispatchFailedError):
                await client.publish(PublicationPayload(), [])

    @pytest.mark.asyncio
    async def test_connection_error_raises(self):
        async with PublishWebhookClient("http://127.0.0.1:9/hook", timeout=2) as client:
            with pytest.raises(DispatchFailedError):
                await client.publish(PublicationPayload(), [])


class TestProspectionWebhookClient:
    @pytest.mark.asyncio
    async def test_connect_returns_trimmed_state(self, server, backend):
        async with ProspectionWebhookClient(str(server.make_url("/hook"))) as client:
            state = await client.connect("https://li/alice")

        assert state == "connecté"
        assert backend.requests[0][2] == {"action": "connexion", "lien LinkedIn": "https://li/alice"}

    @pytest.mark.asyncio
    async def test_publish_and_verify_bodies(self, server, backend):
        async with ProspectionWebhookClient(str(server.make_url("/hook"))) as client:
            await client.publish_message("https://li/bruno", "Bonjour")
            await client.verify_connection("https://li/alice")

        assert [r[2] for r in backend.requests] == [
            {"action": "publier", "lien LinkedIn": "https://li/bruno", "message": "Bonjour"},
            {"action": "connexion verification", "lien LinkedIn": "https://li/alice"},
        ]


class TestSupabaseScheduleStore:
    @pytest_asyncio.fixture
    async def store(self, server):
        client = SupabaseClient(str(server.make_url("/")), "secret-key")
        yield SupabaseScheduleStore(client)
        await client.close()

    @pytest.mark.asyncio
    async def test_list_scheduled_filters(self, store, backend):
        records = await store.list_scheduled()

        assert [r.id for r in records] == ["1"]
        method, query, _, headers = backend.requests[0]
        assert method == "GET"
        assert ("statut", "eq.Planifiée") in query
        assert ("date_brute", "not.is.null") in query
        assert headers["apikey"] == "secret-key"
        assert headers["Authorization"] == "Bearer secret-key"

    @pytest.mark.asyncio
    async def test_get_status(self, store):
        assert await store.get_status("2") == "Publiée"
        assert await store.get_status("404") is None

    @pytest.mark.asyncio
    async def test_conditional_update(self, store, backend):
        updated = await store.update_status("1", PublicationStatus.DISPATCHED, expected=PublicationStatus.SCHEDULED)

        assert updated is True
        assert backend.rows["1"]["statut"] == "Publiée"
        method, query, body, headers = backend.requests[-1]
        assert ("statut", "eq.Planifiée") in query
        assert body == {"statut": "Publiée"}
        assert headers["Prefer"] == "return=representation"

    @pytest.mark.asyncio
    async def test_conditional_update_lost(self, store, backend):
        updated = await store.update_status("2", PublicationStatus.DISPATCHED, expected=PublicationStatus.SCHEDULED)
        assert updated is False

    @pytest.mark.asyncio
    async def test_errors_are_typed(self, store, backend):
        backend.fail_table = True

        with pytest.raises(StoreReadError):
            await store.get_status("1")
        with pytest.raises(StoreWriteError):
            await store.update_status("1", PublicationStatus.DISPATCHED)


class TestSupabaseProspectStore:
    @pytest.mark.asyncio
    async def test_list_by_state_query(self, server, backend):
        client = SupabaseClient(str(server.make_url("/")), "k")
        store = SupabaseProspectStore(client)
        try:
            await store.list_by_state("en attente d'acceptation")
            await store.update_state("7", "connecté")
        finally:
            await client.close()

        _, query, _, _ = backend.requests[0]
        assert ("etat", "ilike.en attente d'acceptation") in query
        assert ("profil_link", "not.is.null") in query
        assert ("profil_link", "neq.") in query
        method, query, body, _ = backend.requests[1]
        assert (method, body) == ("PATCH", {"etat": "connecté"})
        assert ("id", "eq.7") in query
