"""
Asset Index

Marketing asset text split into overlapping chunks and stored in a pgvector
collection. Similarity search over the chunks feeds document excerpts into
AI prompts (email drafts, the profile context).

Disabled (every search empty, nothing indexed) without EMBEDDING_BASE_URL.
"""
import io
import logging
import re
import zipfile
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

import fitz  # PyMuPDF
import httpx
from docx import Document as DocxDocument
from docx.opc.exceptions import PackageNotFoundError
from langchain_core.vectorstores import VectorStore
from langchain_ollama.embeddings import OllamaEmbeddings
from langchain_postgres import PGVector

from ..config import Config
from ..models.marketing_asset import MarketingAsset

logger = logging.getLogger("expocrm.services.asset_index")

CHUNK_SIZE = 1000
CHUNK_OVERLAP = 200

GLOBAL_CONTEXT_QUERY = "general company information, products, services, and value proposition"
GLOBAL_CONTEXT_COUNT = 8
GLOBAL_CONTEXT_THRESHOLD = 0.3

EXCERPTS_PER_ASSET = 3
EXCERPT_THRESHOLD = 0.4
EXCERPT_QUERY_CHARS = 1000

TEXT_EXTENSIONS = (".txt", ".md", ".csv")

STOP_WORDS = {
    "a", "an", "the", "and", "or", "but", "if", "then", "so",
    "of", "in", "on", "at", "to", "for", "from", "by", "with", "about", "as", "into",
    "is", "are", "was", "were", "be", "been", "am", "do", "does", "did", "has", "have", "had",
    "i", "you", "he", "she", "it", "we", "they", "me", "him", "her", "us", "them",
    "my", "your", "his", "its", "our", "their", "this", "that", "these", "those",
    "what", "who", "when", "where", "why", "how", "which",
    "not", "no", "can", "will", "would", "should", "could", "may", "just", "very", "also",
}


@dataclass
class AssetChunk:
    """A stored chunk returned by a similarity search"""
    content: str
    asset_id: Optional[str]
    asset_name: Optional[str]
    similarity: float
    keyword_score: int = 0


def clean_text(text: str) -> str:
    """Collapse all whitespace runs into single spaces"""
    return re.sub(r"\s+", " ", text or "").strip()


def chunk_text(text: str, chunk_size: int = CHUNK_SIZE, overlap: int = CHUNK_OVERLAP) -> List[str]:
    """
    Split text into overlapping windows.

    A window ends after the last period (or else at the last space) of its
    second half when there is one, so chunks rarely cut a sentence. Each
    window starts `overlap` characters before the previous one ended.
    """
    if not text:
        return []
    if len(text) <= chunk_size:
        return [text]

    chunks = []
    start = 0
    while start < len(text):
        end = start + chunk_size
        if end < len(text):
            period = text.rfind(".", 0, end + 1)
            if period > start + chunk_size // 2:
                end = period + 1
            else:
                space = text.rfind(" ", 0, end + 1)
                if space > start + chunk_size // 2:
                    end = space

        chunk = text[start:end].strip()
        if chunk:
            chunks.append(chunk)
        if end >= len(text):
            break
        start = max(end - overlap, start + 1)
    return chunks


def extract_text(filename: str, content: bytes, content_type: str = "") -> str:
    """
    Plain text of a PDF, Word (.docx) or text file.

    Returns '' for file types without text extraction.

    Raises:
        ValueError: If the file cannot be parsed
    """
    name = (filename or "").lower()
    try:
        if name.endswith(".pdf"):
            with fitz.open(stream=content, filetype="pdf") as doc:
                return "\n".join(page.get_text() for page in doc)
        if name.endswith(".docx"):
            document = DocxDocument(io.BytesIO(content))
            return "\n".join(p.text for p in document.paragraphs if p.text.strip())
    except (RuntimeError, zipfile.BadZipFile, PackageNotFoundError) as e:
        raise ValueError(f"Failed to parse {filename}: {e}")

    if name.endswith(TEXT_EXTENSIONS) or content_type.startswith("text"):
        return content.decode("utf-8", errors="replace")

    logger.warning(f"Unsupported file type for text extraction: {filename}")
    return ""


def chunk_ids(asset_id, count: int) -> List[str]:
    """Vector store ids of an asset's chunks"""
    return [f"{asset_id}:{index}" for index in range(count)]


def keyword_score(query: str, content: str) -> int:
    """Query keywords (stop words removed) that occur in the chunk"""
    keywords = {w for w in query.lower().split() if w not in STOP_WORDS}
    text = content.lower()
    return sum(1 for keyword in keywords if keyword in text)


def format_excerpts(chunks: Iterable[AssetChunk]) -> str:
    return "\n---\n".join(chunk.content for chunk in chunks)


class AssetIndex:
    """Chunked marketing asset text in a pgvector collection"""

    def __init__(self, vector_store: Optional[VectorStore] = None, timeout: float = 60.0):
        self._store = vector_store
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return self._store is not None or bool(Config.EMBEDDING_BASE_URL)

    @property
    def store(self) -> VectorStore:
        """Vector store, created on first use"""
        if self._store is None:
            embeddings = OllamaEmbeddings(model=Config.EMBEDDING_MODEL, base_url=Config.EMBEDDING_BASE_URL)
            self._store = PGVector(
                embeddings=embeddings,
                connection=Config.get_vector_dsn(),
                collection_name=Config.ASSET_COLLECTION,
                use_jsonb=True,
                async_mode=True,
            )
            logger.info(f"Vector store ready: collection={Config.ASSET_COLLECTION}")
        return self._store

    async def download(self, asset: MarketingAsset) -> Tuple[bytes, str]:
        """File content and content type of an asset"""
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            response = await client.get(asset.file_url)
            response.raise_for_status()
            return response.content, response.headers.get("content-type", "")

    async def index_asset(self, asset: MarketingAsset) -> int:
        """
        Extract, chunk and embed an asset.

        Returns the number of chunks stored (0 when disabled or no text).

        Raises:
            httpx.HTTPError: If the file cannot be downloaded
            ValueError: If the file cannot be parsed
        """
        if not self.enabled:
            return 0

        content, content_type = await self.download(asset)
        filename = asset.name if "." in (asset.name or "") else asset.file_url.split("?")[0]
        chunks = chunk_text(clean_text(extract_text(filename, content, content_type)))
        if not chunks:
            logger.warning(f"No text extracted from asset {asset.id} ({asset.name})")
            return 0

        await self.store.aadd_texts(
            chunks,
            metadatas=[
                {"asset_id": str(asset.id), "asset_name": asset.name, "chunk": index, "length": len(chunk)}
                for index, chunk in enumerate(chunks)
            ],
            ids=chunk_ids(asset.id, len(chunks)),
        )
        logger.info(f"Indexed asset {asset.id} ({asset.name}): {len(chunks)} chunks")
        return len(chunks)

    async def remove_asset(self, asset_id: UUID, chunk_count: int) -> None:
        if not self.enabled or chunk_count <= 0:
            return
        await self.store.adelete(ids=chunk_ids(asset_id, chunk_count))
        logger.info(f"Removed {chunk_count} chunks of asset {asset_id}")

    async def search(
        self,
        query: str,
        k: int = 5,
        threshold: float = 0.5,
        asset_ids: Optional[List] = None,
    ) -> List[AssetChunk]:
        """
        Chunks similar to the query, best first.

        Vector hits under the similarity threshold are dropped; the rest are
        reranked by keyword overlap with the query, then by similarity.
        """
        if not self.enabled or not (query or "").strip():
            return []

        search_filter = {"asset_id": {"$in": [str(a) for a in asset_ids]}} if asset_ids else None
        results = await self.store.asimilarity_search_with_score(query, k=k, filter=search_filter)

        chunks = []
        for doc, distance in results:
            similarity = 1.0 - distance
            if similarity < threshold:
                continue
            chunks.append(AssetChunk(
                content=doc.page_content,
                asset_id=doc.metadata.get("asset_id"),
                asset_name=doc.metadata.get("asset_name"),
                similarity=similarity,
                keyword_score=keyword_score(query, doc.page_content),
            ))

        chunks.sort(key=lambda c: (c.keyword_score, c.similarity), reverse=True)
        logger.info(f"Asset search: {len(results)} hits, {len(chunks)} above {threshold}")
        return chunks

    async def global_context(self) -> str:
        """Company background drawn from all assets, for the profile context"""
        chunks = await self.search(
            GLOBAL_CONTEXT_QUERY, k=GLOBAL_CONTEXT_COUNT, threshold=GLOBAL_CONTEXT_THRESHOLD
        )
        if not chunks:
            return ""
        return f"\n\nADDITIONAL COMPANY CONTEXT (from internal documents):\n{format_excerpts(chunks)}"

    async def excerpts(self, query: str, asset_ids: List) -> str:
        """Excerpts of the given assets relevant to the query, as a prompt section"""
        query = (query or "")[:EXCERPT_QUERY_CHARS]
        found = []
        for asset_id in asset_ids:
            chunks = await self.search(query, k=EXCERPTS_PER_ASSET, threshold=EXCERPT_THRESHOLD, asset_ids=[asset_id])
            if chunks:
                found.append(format_excerpts(chunks))
        if not found:
            return ""
        return (
            "\n\nRELEVANT DOCUMENT EXCERPTS:\n"
            + "\n\n".join(found)
            + "\n\nUse the above information to add specific details to the email where appropriate.\n"
        )
