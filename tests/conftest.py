import os
import tempfile
import time

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = os.path.join(tempfile.gettempdir(), "crossword_sync_test_errors.log")

import pytest
from fastapi.testclient import TestClient

from crossword_sync import models
from crossword_sync.core.database import Base, SessionLocal, engine
from crossword_sync.main import app
from crossword_sync.schemas import PuzzleCreate, PuzzleData
from crossword_sync.services import PuzzleServices


def clue(number, direction, row, col, answer):
    return {
        "number": number,
        "direction": direction,
        "text": f"{direction.title()} {number}",
        "enumeration": str(len(answer)),
        "answer": answer,
        "explanation": "",
        "row": row,
        "col": col,
        "length": len(answer),
        "wordBoundaries": [],
    }


# 2x2, no black cells
TINY_DOCUMENT = {
    "puzzleId": "tiny",
    "title": "Tiny Puzzle",
    "size": {"rows": 2, "cols": 2},
    "grid": ["..", ".."],
    "numbers": [[1, 2], [3, None]],
    "clues": {
        "across": [clue(1, "across", 1, 1, "AT"), clue(3, "across", 2, 1, "BY")],
        "down": [clue(1, "down", 1, 1, "AB"), clue(2, "down", 1, 2, "TY")],
    },
}

# 3x3 with a black centre; the middle cells of the side columns only have down clues
RING_DOCUMENT = {
    "puzzleId": "ring",
    "title": "Ring Puzzle",
    "size": {"rows": 3, "cols": 3},
    "grid": ["...", ".#.", "..."],
    "numbers": [[1, None, 2], [None, None, None], [3, None, None]],
    "clues": {
        "across": [clue(1, "across", 1, 1, "CAT"), clue(3, "across", 3, 1, "DOG")],
        "down": [clue(1, "down", 1, 1, "CUD"), clue(2, "down", 1, 3, "TAG")],
    },
}


def square_document(puzzle_id, size):
    return {
        "puzzleId": puzzle_id,
        "title": f"Square {size}",
        "size": {"rows": size, "cols": size},
        "grid": ["." * size for _ in range(size)],
        "numbers": [],
        "clues": {"across": [], "down": []},
    }


def auth(user_id):
    return {"X-User-Id": user_id}


def wait_for(predicate, timeout=2.0):
    """Poll until a condition set by the server's event loop holds"""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def users(database):
    db = SessionLocal()
    db.add_all([
        models.User(id="owner", email="owner@example.com", first_name="Olive", role="user"),
        models.User(id="guest", email="guest@example.com", first_name="Gus", role="user"),
        models.User(id="admin", email="admin@example.com", first_name="Ada", role="admin"),
    ])
    db.commit()
    db.close()
    return {"owner": "owner", "guest": "guest", "admin": "admin"}


@pytest.fixture
def puzzles(database):
    db = SessionLocal()
    services = PuzzleServices(db)
    ids = {}
    for document in (TINY_DOCUMENT, RING_DOCUMENT, square_document("big", 15)):
        puzzle = services.create_puzzle(PuzzleCreate(data=PuzzleData.model_validate(document)))
        ids[document["puzzleId"]] = puzzle.id
    db.close()
    return ids


@pytest.fixture
def client(users, puzzles):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def registry(client):
    return app.state.registry


@pytest.fixture
def new_session(client, puzzles):
    """Factory: start a session as a user and return its id"""
    def _create(user_id="owner", puzzle="tiny", collaborative=True, **extra):
        response = client.post(
            "/api/sessions",
            json={"puzzleId": puzzles[puzzle], "isCollaborative": collaborative, **extra},
            headers=auth(user_id),
        )
        assert response.status_code == 200, response.text
        return response.json()["id"]
    return _create
