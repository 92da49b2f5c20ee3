"""Main entry point for the Markdown knowledgebase chat API."""
import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from config import PORT, LOG_LEVEL, LOG_FORMAT, CORS_ORIGINS
from logger import setup_logging
from models.answer import AnswerResult
from models.api import ChatRequest, ChatResponse, HealthResponse, RootResponse, Source
from services.errors import RAGServiceError
from services.chat_orchestrator import ChatOrchestrator
from services.embedding_model import EmbeddingModel
from services.llm_client import LLMClient
from services.retrieval_engine import RetrievalEngine
from services.vector_store import VectorStore

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Knowledgebase Chat",
    description="Offline RAG chatbot over local markdown documents, served by Ollama",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services (will be done on startup)
vector_store: VectorStore = None
llm_client: LLMClient = None
chat_orchestrator: ChatOrchestrator = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global vector_store, llm_client, chat_orchestrator

    setup_logging(LOG_LEVEL, json_format=LOG_FORMAT == "json")
    logger.info("Initializing knowledgebase chat services...")

    embedding_model = EmbeddingModel()
    vector_store = VectorStore()
    llm_client = LLMClient()
    retrieval_engine = RetrievalEngine(vector_store, embedding_model)
    chat_orchestrator = ChatOrchestrator(retrieval_engine, llm_client)

    if not vector_store.exists():
        logger.warning("Vector store not found. Run 'python ingest_documents.py' to create it.")
    else:
        logger.info("Vector store found")

    if not llm_client.is_available():
        logger.warning("Ollama not available. Please ensure Ollama is running.")
    else:
        logger.info("Ollama is available")


@app.get("/", response_model=RootResponse)
async def root() -> RootResponse:
    """Service description."""
    return RootResponse(
        message="RAG Chatbot API (Offline - Ollama)",
        endpoints={
            "POST /chat": "Send a message to the chatbot",
            "GET /health": "Check server health"
        }
    )


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Report whether the vector store exists and the chat model is reachable."""
    store_exists = vector_store.exists()
    ollama_available = llm_client.is_available()

    if store_exists and ollama_available:
        message = "Server ready"
    elif not ollama_available:
        message = "Ollama not available. Please ensure Ollama is running."
    else:
        message = "Vector store not found. Run 'python ingest_documents.py' first."

    return HealthResponse(
        status="ok",
        vector_store_exists=store_exists,
        ollama_available=ollama_available,
        message=message
    )


@app.post("/chat", response_model=ChatResponse)
def chat_endpoint(request: ChatRequest) -> ChatResponse:
    """
    Answer a message from the knowledgebase.

    Declared as a plain function so FastAPI runs the blocking Ollama
    calls in its threadpool.

    Args:
        request: ChatRequest with the user message

    Returns:
        ChatResponse with answer, sources, and model

    Raises:
        HTTPException: 400 for empty messages, 500 for a missing store or an
            embedding dimension mismatch, 503 when Ollama cannot be reached
    """
    try:
        result = chat_orchestrator.answer(request.message)
    except RAGServiceError as e:
        if e.http_status >= 500:
            logger.error(f"Error in /chat [{e.error.code}]: {e.error.message}", exc_info=True)
        else:
            logger.info(f"Rejected /chat request: {e.error.message}")
        raise HTTPException(status_code=e.http_status, detail={"error": e.to_dict()})
    except Exception as e:
        logger.error(f"Unexpected error processing chat request: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "Failed to process chat request",
                    "details": {"original_error": str(e)}
                }
            }
        )

    return to_chat_response(result)


def to_chat_response(result: AnswerResult) -> ChatResponse:
    """Map an AnswerResult to the response payload."""
    return ChatResponse(
        answer=result.answer_text,
        sources=[
            Source(
                filename=source.source_id,
                similarity=f"{source.similarity:.4f}",
                preview=source.preview + "..."
            )
            for source in result.sources
        ],
        using_knowledgebase=result.using_knowledgebase,
        model=result.model
    )


def run() -> None:
    """Run the API with uvicorn."""
    import uvicorn
    logger.info(f"Starting knowledgebase chat API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)


if __name__ == "__main__":
    run()
