import logging
from datetime import datetime, timezone
from sqlalchemy import create_engine, Column, String, Integer, Text, DateTime, JSON
from sqlalchemy.orm import declarative_base, sessionmaker
from .records import EmbeddedFile, FileRecord
from .vectors import coerce_embedding
from ..config.settings import DATABASE_URL

Base = declarative_base()


class FileDocument(Base):
    __tablename__ = "file_documents"

    user_id = Column(String, primary_key=True)
    file_id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    mime_type = Column(String, nullable=False)
    size_bytes = Column(Integer, nullable=True)
    modified_time = Column(DateTime(timezone=True), nullable=True)
    folder_path = Column(String, nullable=True)


class DocumentEmbedding(Base):
    __tablename__ = "document_embeddings"

    user_id = Column(String, primary_key=True)
    file_id = Column(String, primary_key=True)
    file_name = Column(String, nullable=False)
    embedding = Column(JSON, nullable=True)
    content = Column(Text, nullable=True)
    file_metadata = Column("metadata", JSON, nullable=True)


class CleanupResult(Base):
    __tablename__ = "cleanup_results"

    user_id = Column(String, primary_key=True)
    file_id = Column(String, primary_key=True)
    file_name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    reason = Column(Text)
    confidence = Column(String)
    size_bytes = Column(Integer)
    scanned_at = Column(DateTime(timezone=True))


engine = create_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine)


def init_db(bind=None):
    """Creates the organizer tables."""
    bind = bind or engine
    Base.metadata.create_all(bind)
    logging.info(f"✅ Database initialized at {bind.url}")


def _commit(session, action):
    try:
        session.commit()
    except Exception as e:
        session.rollback()
        logging.error(f"❌ Failed to {action}: {e}")
        raise


def upsert_document(session, user_id, record: FileRecord):
    session.merge(FileDocument(
        user_id=user_id,
        file_id=record.file_id,
        name=record.name,
        mime_type=record.mime_type,
        size_bytes=record.size_bytes,
        modified_time=record.modified_time,
        folder_path=record.folder_path,
    ))
    _commit(session, f"save document {record.file_id}")


def upsert_embedding(session, user_id, file_id, file_name, embedding, content=None, metadata=None):
    session.merge(DocumentEmbedding(
        user_id=user_id,
        file_id=file_id,
        file_name=file_name,
        embedding=list(embedding) if embedding is not None else None,
        content=content,
        file_metadata=metadata or {},
    ))
    _commit(session, f"save embedding {file_id}")


def save_cleanup_results(session, user_id, files, scanned_at=None):
    """Stores a scan's results; a file's previous result is overwritten."""
    scanned_at = scanned_at or datetime.now(timezone.utc)
    for f in files:
        session.merge(CleanupResult(
            user_id=user_id,
            file_id=f.file_id,
            file_name=f.file_name,
            category=f.category,
            reason=f.reason,
            confidence=f.confidence,
            size_bytes=f.size_bytes,
            scanned_at=scanned_at,
        ))
    _commit(session, f"save {len(files)} cleanup results")
    logging.info(f"💾 Saved {len(files)} cleanup results for user {user_id}")


def load_file_records(session, user_id):
    rows = session.query(FileDocument).filter(FileDocument.user_id == user_id).order_by(FileDocument.file_id)
    return [
        FileRecord(
            file_id=r.file_id,
            name=r.name,
            mime_type=r.mime_type,
            size_bytes=r.size_bytes,
            modified_time=r.modified_time,
            folder_path=r.folder_path,
        )
        for r in rows
    ]


def load_cleanup_results(session, user_id):
    return (
        session.query(CleanupResult)
        .filter(CleanupResult.user_id == user_id)
        .order_by(CleanupResult.file_id)
        .all()
    )


def load_embedded_files(session, user_id):
    """
    Loads a user's embeddings as EmbeddedFile records.

    Rows without an embedding are skipped; malformed embeddings raise
    InvalidInputError.
    """
    rows = (
        session.query(DocumentEmbedding)
        .filter(DocumentEmbedding.user_id == user_id)
        .order_by(DocumentEmbedding.file_id)
    )
    files = []
    for r in rows:
        vector = coerce_embedding(r.embedding)
        if vector is None:
            logging.warning(f"⚠️ No embedding stored for {r.file_name}, skipping")
            continue
        metadata = r.file_metadata or {}
        files.append(EmbeddedFile(
            file_id=r.file_id,
            file_name=r.file_name,
            embedding=vector,
            content=r.content,
            folder_path=metadata.get("folderPath") or metadata.get("folder_path"),
            mime_type=metadata.get("mimeType") or metadata.get("mime_type"),
        ))
    return files
