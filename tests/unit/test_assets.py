import io
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import fitz
import pytest
from docx import Document as DocxDocument
from langchain_core.documents import Document

from expocrm.models.contact import Contact
from expocrm.models.marketing_asset import MarketingAsset
from expocrm.models.user_profile import UserProfile
from expocrm.services import asset_index as asset_index_module
from expocrm.services.asset_index import AssetIndex, chunk_text, extract_text, keyword_score
from expocrm.services.email_service import EmailService
from expocrm.services.exceptions import NotFoundError
from expocrm.services.profile_service import ProfileService


def returns_argument(value, *args, **kwargs):
    return value


@pytest.fixture
def store():
    fake = MagicMock()
    fake.aadd_texts = AsyncMock()
    fake.adelete = AsyncMock()
    fake.asimilarity_search_with_score = AsyncMock(return_value=[])
    return fake


@pytest.fixture
def brochure():
    return MarketingAsset(name="brochure.txt", file_url="https://files.acme.test/brochure.txt")


class TestChunking:

    def test_short_text_is_one_chunk(self):
        assert chunk_text("Welding cells for SMEs.") == ["Welding cells for SMEs."]
        assert chunk_text("") == []

    def test_long_text_breaks_after_sentences_and_overlaps(self):
        sentence = "Our robotic welding cell cuts cycle time by forty percent. "
        text = (sentence * 60).strip()

        chunks = chunk_text(text)

        assert len(chunks) > 1
        assert all(len(c) <= 1000 for c in chunks)
        assert all(c.endswith(".") for c in chunks)
        assert chunks[1][:50] in chunks[0]
        assert text.endswith(chunks[-1])


class TestExtractText:

    def test_plain_text(self):
        assert extract_text("notes.md", "Präzision".encode()) == "Präzision"

    def test_docx(self):
        document = DocxDocument()
        document.add_paragraph("Robotic welding cells")
        document.add_paragraph("")
        document.add_paragraph("Service in 24 hours")
        buffer = io.BytesIO()
        document.save(buffer)

        assert extract_text("deck.docx", buffer.getvalue()) == "Robotic welding cells\nService in 24 hours"

    def test_pdf(self):
        doc = fitz.open()
        page = doc.new_page()
        page.insert_text((72, 72), "Robotic welding cells")
        content = doc.tobytes()
        doc.close()

        assert "Robotic welding cells" in extract_text("brochure.pdf", content)

    def test_corrupt_docx_is_value_error(self):
        with pytest.raises(ValueError, match="Failed to parse"):
            extract_text("deck.docx", b"not a zip")

    def test_unknown_type_is_empty(self):
        assert extract_text("video.mp4", b"\x00\x01", "video/mp4") == ""


def test_keyword_score_ignores_stop_words():
    assert keyword_score("the welding cells for you", "Robotic welding cells") == 2


class TestAssetIndex:

    def test_disabled_without_embedding_server(self, monkeypatch):
        monkeypatch.setattr(asset_index_module.Config, "EMBEDDING_BASE_URL", "")
        assert not AssetIndex().enabled

    @pytest.mark.asyncio
    async def test_disabled_search_is_empty(self, monkeypatch):
        monkeypatch.setattr(asset_index_module.Config, "EMBEDDING_BASE_URL", "")
        assert await AssetIndex().search("welding") == []

    @pytest.mark.asyncio
    async def test_index_asset_stores_chunks(self, store, brochure):
        index = AssetIndex(vector_store=store)
        index.download = AsyncMock(return_value=(b"Robotic   welding\n\ncells.", "text/plain"))

        assert await index.index_asset(brochure) == 1

        args, kwargs = store.aadd_texts.await_args
        assert args[0] == ["Robotic welding cells."]
        assert kwargs["ids"] == [f"{brochure.id}:0"]
        assert kwargs["metadatas"][0]["asset_id"] == str(brochure.id)

    @pytest.mark.asyncio
    async def test_index_asset_without_text(self, store):
        index = AssetIndex(vector_store=store)
        index.download = AsyncMock(return_value=(b"\x00", "video/mp4"))

        assert await index.index_asset(MarketingAsset(name="teaser.mp4", file_url="https://x.test/t.mp4")) == 0
        store.aadd_texts.assert_not_called()

    @pytest.mark.asyncio
    async def test_remove_asset_deletes_chunk_ids(self, store):
        asset_id = uuid4()
        await AssetIndex(vector_store=store).remove_asset(asset_id, 2)
        store.adelete.assert_awaited_once_with(ids=[f"{asset_id}:0", f"{asset_id}:1"])

    @pytest.mark.asyncio
    async def test_search_drops_weak_hits_and_prefers_keywords(self, store):
        store.asimilarity_search_with_score.return_value = [
            (Document(page_content="Company history since 1990", metadata={"asset_id": "a"}), 0.2),
            (Document(page_content="Welding cells for small shops", metadata={"asset_id": "a"}), 0.35),
            (Document(page_content="Unrelated canteen menu", metadata={"asset_id": "a"}), 0.9),
        ]

        chunks = await AssetIndex(vector_store=store).search("welding cells", k=5, threshold=0.5, asset_ids=["a"])

        assert [c.content for c in chunks] == ["Welding cells for small shops", "Company history since 1990"]
        assert chunks[0].similarity == pytest.approx(0.65)
        assert store.asimilarity_search_with_score.await_args.kwargs["filter"] == {"asset_id": {"$in": ["a"]}}

    @pytest.mark.asyncio
    async def test_excerpts_section(self, store):
        store.asimilarity_search_with_score.return_value = [
            (Document(page_content="Welding cells for small shops", metadata={}), 0.1),
        ]

        section = await AssetIndex(vector_store=store).excerpts("welding", [uuid4()])

        assert section.startswith("\n\nRELEVANT DOCUMENT EXCERPTS:\nWelding cells for small shops")

    @pytest.mark.asyncio
    async def test_global_context_empty_without_hits(self, store):
        assert await AssetIndex(vector_store=store).global_context() == ""


class TestProfileAssets:

    @pytest.fixture
    def index(self):
        fake = MagicMock(enabled=True)
        fake.index_asset = AsyncMock(return_value=3)
        fake.remove_asset = AsyncMock()
        fake.global_context = AsyncMock(return_value="\n\nADDITIONAL COMPANY CONTEXT (from internal documents):\nWelding")
        return fake

    @pytest.fixture
    def service(self, index):
        return ProfileService(
            profile_storage=AsyncMock(),
            settings_storage=AsyncMock(),
            asset_storage=AsyncMock(create=AsyncMock(side_effect=returns_argument)),
            asset_index=index,
            cache_seconds=300,
        )

    @pytest.mark.asyncio
    async def test_index_records_chunk_count(self, service, brochure):
        assert await service.index_asset(brochure) == 3
        service.asset_storage.set_chunk_count.assert_awaited_once_with(brochure.id, 3)

    @pytest.mark.asyncio
    async def test_index_failure_keeps_asset(self, service, index, brochure):
        index.index_asset.side_effect = ValueError("Failed to parse brochure.pdf")

        assert await service.index_asset(brochure) == 0
        service.asset_storage.set_chunk_count.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_removes_chunks(self, service, index):
        asset = MarketingAsset(name="deck.pdf", file_url="https://x.test/deck.pdf", chunk_count=4)
        service.asset_storage.get_by_id.return_value = asset
        service.asset_storage.delete.return_value = True

        assert await service.delete_asset(asset.id) is True
        index.remove_asset.assert_awaited_once_with(asset.id, 4)

    @pytest.mark.asyncio
    async def test_delete_missing(self, service, index):
        service.asset_storage.get_by_id.return_value = None
        assert await service.delete_asset(uuid4()) is False
        index.remove_asset.assert_not_called()

    @pytest.mark.asyncio
    async def test_ai_context_carries_documents(self, service):
        profile = UserProfile(name="Acme Robotics")
        service.profile_storage.get.return_value = profile

        context = await service.get_ai_context()

        assert context.startswith(profile.to_context())
        assert context.endswith("Welding")

    @pytest.mark.asyncio
    async def test_ai_context_survives_search_failure(self, service, index):
        index.global_context.side_effect = RuntimeError("vector store down")
        profile = UserProfile(name="Acme Robotics")
        service.profile_storage.get.return_value = profile

        assert await service.get_ai_context() == profile.to_context()

    @pytest.mark.asyncio
    async def test_reindex_missing_asset(self, service):
        service.asset_storage.get_by_id.return_value = None
        with pytest.raises(NotFoundError):
            await service.reindex_asset(uuid4())

    @pytest.mark.asyncio
    async def test_reindex_requires_index(self):
        service = ProfileService(AsyncMock(), AsyncMock(), AsyncMock())
        with pytest.raises(ValueError, match="not configured"):
            await service.reindex_asset(uuid4())


@pytest.mark.asyncio
async def test_draft_prompt_includes_asset_excerpts():
    ai = MagicMock()
    ai.prompt.return_value = "system prompt"
    ai.extract_structured_data = AsyncMock(return_value={"subject": "Hi", "body": "Hello"})
    index = MagicMock(enabled=True)
    index.excerpts = AsyncMock(return_value="\n\nRELEVANT DOCUMENT EXCERPTS:\nWelding cells")
    profile = AsyncMock()
    profile.get_ai_context.return_value = "I am Ana"
    service = EmailService(
        storage=AsyncMock(create=AsyncMock(side_effect=returns_argument)),
        contact_storage=AsyncMock(),
        event_storage=AsyncMock(),
        note_storage=AsyncMock(list_by_contact=AsyncMock(return_value=[])),
        interaction_storage=AsyncMock(),
        profile_service=profile,
        ai_service=ai,
        asset_index=index,
    )
    contact = Contact(first_name="Bob", job_title="Plant Manager")
    service.contact_storage.get_by_id.return_value = contact
    asset_id = uuid4()

    draft = await service.generate_draft(contact.id, "follow_up", asset_ids=[str(asset_id)])

    assert draft.subject == "Hi"
    assert ai.extract_structured_data.await_args.args[0].endswith("Welding cells")
    query, ids = index.excerpts.await_args.args
    assert "Plant Manager" in query
    assert ids == [asset_id]
