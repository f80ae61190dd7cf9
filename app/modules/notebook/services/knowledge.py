"""
Static demo data: the sample document catalogue, the keyword-matched answer
table and the fallback answer.

Loaded once at import time and never mutated. Entry order is significant:
the resolver returns the first entry with a matching keyword.
"""

from __future__ import annotations

from typing import Tuple

from app.modules.notebook.schema.chat import ChatAnswer, KnowledgeEntry, SourceCitation
from app.modules.notebook.schema.documents import DocumentInfo


def _src(filename: str, score: float, page: int | None = None) -> SourceCitation:
    return SourceCitation(filename=filename, relevance_score=score, page_number=page)


SAMPLE_DOCUMENTS: Tuple[DocumentInfo, ...] = (
    DocumentInfo(
        filename="Machine_Learning_Basics.pdf",
        file_type="pdf",
        chunk_count=24,
        file_size=2457600,
        indexed_at="2025-10-15T09:30:00Z",
    ),
    DocumentInfo(
        filename="Python_Best_Practices.md",
        file_type="md",
        chunk_count=18,
        file_size=45200,
        indexed_at="2025-10-15T09:30:05Z",
    ),
    DocumentInfo(
        filename="RAG_Architecture_Guide.pdf",
        file_type="pdf",
        chunk_count=31,
        file_size=3145728,
        indexed_at="2025-10-15T09:30:12Z",
    ),
    DocumentInfo(
        filename="Neural_Networks_Overview.txt",
        file_type="txt",
        chunk_count=12,
        file_size=28400,
        indexed_at="2025-10-15T09:30:15Z",
    ),
    DocumentInfo(
        filename="Data_Preprocessing_Pipeline.py",
        file_type="py",
        chunk_count=8,
        file_size=15600,
        indexed_at="2025-10-15T09:30:18Z",
    ),
)


def total_chunks(documents=SAMPLE_DOCUMENTS) -> int:
    return sum(d.chunk_count for d in documents)


KNOWLEDGE_TABLE: Tuple[KnowledgeEntry, ...] = (
    KnowledgeEntry(
        keywords=("machine learning", "ml", "what is machine learning"),
        response=(
            "**Machine learning** is a subset of artificial intelligence that enables systems to learn "
            "and improve from experience without being explicitly programmed.\n\n"
            "Based on the indexed documents, there are three main types:\n\n"
            "1. **Supervised Learning** - Uses labeled training data to learn a mapping function\n"
            "2. **Unsupervised Learning** - Finds hidden patterns in data without labels\n"
            "3. **Reinforcement Learning** - Learns through trial and error with rewards\n\n"
            "The documents also highlight that feature engineering and data quality are critical "
            "factors in ML model performance."
        ),
        sources=(
            _src("Machine_Learning_Basics.pdf", 0.94, 3),
            _src("Neural_Networks_Overview.txt", 0.78),
        ),
    ),
    KnowledgeEntry(
        keywords=("rag", "retrieval augmented", "retrieval-augmented generation"),
        response=(
            "**Retrieval-Augmented Generation (RAG)** is a technique that enhances LLM responses by "
            "grounding them in relevant retrieved documents.\n\n"
            "The RAG pipeline works in several stages:\n\n"
            "1. **Document Ingestion** - Documents are split into chunks and converted to vector embeddings\n"
            "2. **Vector Storage** - Embeddings are stored in a vector database (e.g., ChromaDB)\n"
            "3. **Retrieval** - When a query arrives, the most relevant chunks are retrieved using similarity search\n"
            "4. **Generation** - The LLM generates a response using the retrieved context\n\n"
            "This approach significantly reduces hallucinations and provides traceable source "
            "citations for every answer."
        ),
        sources=(
            _src("RAG_Architecture_Guide.pdf", 0.97, 1),
            _src("Machine_Learning_Basics.pdf", 0.65, 12),
        ),
    ),
    KnowledgeEntry(
        keywords=("python", "best practice", "coding standard", "code quality"),
        response=(
            "Based on the indexed documents, here are the key **Python best practices**:\n\n"
            "1. **Use virtual environments** - Isolate project dependencies with `venv` or `conda`\n"
            "2. **Follow PEP 8** - Consistent code formatting improves readability\n"
            "3. **Type hints** - Add type annotations for better IDE support and documentation\n"
            "4. **Error handling** - Use specific exception types rather than bare `except`\n"
            "5. **Testing** - Write unit tests with `pytest` and aim for meaningful coverage\n"
            "6. **Documentation** - Use docstrings for public APIs and keep README files updated\n\n"
            "The document also recommends using tools like `black` for formatting and `ruff` for linting."
        ),
        sources=(
            _src("Python_Best_Practices.md", 0.96),
            _src("Data_Preprocessing_Pipeline.py", 0.52),
        ),
    ),
    KnowledgeEntry(
        keywords=("neural network", "deep learning", "layers", "neuron"),
        response=(
            "**Neural networks** are computing systems inspired by biological neural networks in the brain.\n\n"
            "Key concepts from the indexed documents:\n\n"
            "- **Layers**: Input layer, hidden layers, and output layer form the network architecture\n"
            "- **Activation Functions**: ReLU, sigmoid, and softmax introduce non-linearity\n"
            "- **Backpropagation**: The algorithm used to train neural networks by computing gradients\n"
            "- **Loss Functions**: Measure how far predictions are from actual values\n\n"
            "Deep learning refers to neural networks with multiple hidden layers, enabling them to learn "
            "hierarchical representations of data. Common architectures include CNNs for images and "
            "Transformers for text."
        ),
        sources=(
            _src("Neural_Networks_Overview.txt", 0.95),
            _src("Machine_Learning_Basics.pdf", 0.72, 8),
        ),
    ),
    KnowledgeEntry(
        keywords=("data", "preprocessing", "clean", "pipeline", "transform"),
        response=(
            "**Data preprocessing** is a crucial step in any machine learning pipeline. The indexed "
            "documents describe several key stages:\n\n"
            "1. **Data Cleaning** - Handle missing values, remove duplicates, fix inconsistencies\n"
            "2. **Feature Scaling** - Normalize or standardize numerical features\n"
            "3. **Encoding** - Convert categorical variables using one-hot or label encoding\n"
            "4. **Feature Selection** - Remove irrelevant or redundant features\n"
            "5. **Train/Test Split** - Divide data into training and evaluation sets\n\n"
            "The Python preprocessing pipeline in the codebase uses `pandas` for data manipulation and "
            "`scikit-learn` for transformations like `StandardScaler` and `LabelEncoder`."
        ),
        sources=(
            _src("Data_Preprocessing_Pipeline.py", 0.93),
            _src("Machine_Learning_Basics.pdf", 0.68, 15),
        ),
    ),
    KnowledgeEntry(
        keywords=("embedding", "vector", "similarity", "chromadb", "vector database"),
        response=(
            "**Vector embeddings** are numerical representations of text that capture semantic meaning. "
            "In this system:\n\n"
            "- **Embedding Model**: `all-minilm:l6-v2` converts text chunks into 384-dimensional vectors\n"
            "- **Vector Store**: ChromaDB stores and indexes these vectors for fast similarity search\n"
            "- **Similarity Search**: When you ask a question, your query is embedded and compared "
            "against stored vectors using cosine similarity\n\n"
            "The top-k most similar chunks are retrieved and passed to the LLM as context. This ensures "
            "responses are grounded in your actual documents rather than the model's general training data."
        ),
        sources=(
            _src("RAG_Architecture_Guide.pdf", 0.91, 5),
            _src("Neural_Networks_Overview.txt", 0.58),
        ),
    ),
    KnowledgeEntry(
        keywords=("hello", "hi", "hey", "help", "what can you do"),
        response=(
            "Hello! I'm your document assistant powered by RAG (Retrieval-Augmented Generation).\n\n"
            "I can help you with questions about the indexed documents. Here are some things you can ask:\n\n"
            "- \"What is machine learning?\"\n"
            "- \"Explain the RAG architecture\"\n"
            "- \"What are Python best practices?\"\n"
            "- \"How do neural networks work?\"\n"
            "- \"What is data preprocessing?\"\n"
            "- \"How do vector embeddings work?\"\n\n"
            "All my responses are grounded in the documents that have been indexed, and I'll always "
            "show you which sources I referenced."
        ),
        sources=(
            _src("RAG_Architecture_Guide.pdf", 0.45, 1),
            _src("Machine_Learning_Basics.pdf", 0.40, 1),
        ),
    ),
)


FALLBACK_ANSWER = ChatAnswer(
    response=(
        "Based on the indexed documents, I found some related information but the query doesn't "
        "closely match any specific section.\n\n"
        "This system uses **Retrieval-Augmented Generation (RAG)** to answer questions by:\n"
        "1. Converting your question into a vector embedding\n"
        "2. Finding the most similar document chunks in ChromaDB\n"
        "3. Passing those chunks as context to the LLM\n"
        "4. Generating a grounded response with source citations\n\n"
        "Try asking about specific topics covered in the documents, such as machine learning, "
        "neural networks, Python best practices, or data preprocessing."
    ),
    sources=[
        _src("RAG_Architecture_Guide.pdf", 0.42, 2),
        _src("Machine_Learning_Basics.pdf", 0.35, 1),
    ],
)
