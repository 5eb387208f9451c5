"""FastAPI server that exposes the child-facing page and endpoints."""

from __future__ import annotations

from threading import Thread

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel
import uvicorn

from waai_app.constants.about import APP_NAME, APP_VERSION
from waai_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from waai_app.core.avatars import get_avatar
from waai_app.core.classroom_manager import ClassroomManager
from waai_app.core.errors import (
    AuthError,
    GateMismatchError,
    GatewayError,
    NotFoundError,
    ValidationError,
    WaaiError,
)
from waai_app.core.markdown_renderer import renderer
from waai_app.core.models import Activity, Child
from waai_app.core.quiz_progress import QuizProgressEngine

_STATUS_BY_ERROR: tuple[tuple[type[WaaiError], int], ...] = (
    (ValidationError, 422),
    (AuthError, 401),
    (GateMismatchError, 403),
    (NotFoundError, 404),
    (GatewayError, 503),
)

_CHILD_PAGE_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>Waai Classroom</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>
      :root { font-family: 'Nunito', 'Segoe UI', system-ui, sans-serif; background: #f4f1ff; color: #2d2a4a; }
      body { margin: 0; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; align-items: center; }
      .card { background: #fff; border-radius: 1rem; padding: 1.5rem; box-shadow: 0 0.5rem 1.5rem rgba(76, 60, 160, 0.15); width: min(720px, 100%); box-sizing: border-box; }
      .hidden { display: none; }
      h1, h2 { color: #6c4cf1; margin-top: 0; }
      .grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(150px, 1fr)); gap: 0.75rem; }
      .tile { border: 2px solid #e4defd; border-radius: 1rem; padding: 1rem; background: #fff; cursor: pointer; text-align: center; font-size: 1rem; }
      .tile:hover { border-color: #6c4cf1; }
      .tile img { width: 80px; height: 80px; display: block; margin: 0 auto 0.5rem; }
      .pin-dots { font-size: 2rem; letter-spacing: 0.5rem; text-align: center; margin: 1rem 0; }
      .keypad { display: grid; grid-template-columns: repeat(3, 1fr); gap: 0.5rem; max-width: 260px; margin: 0 auto; }
      .key { border: none; border-radius: 0.75rem; padding: 1rem; font-size: 1.3rem; background: #ede8ff; cursor: pointer; }
      .primary-button { border: none; border-radius: 0.75rem; padding: 0.85rem 1.5rem; font-size: 1rem; background: #6c4cf1; color: #fff; cursor: pointer; }
      .secondary-button { border: none; border-radius: 0.75rem; padding: 0.85rem 1.5rem; font-size: 1rem; background: #ede8ff; color: #2d2a4a; cursor: pointer; }
      #question-container { min-height: 5rem; font-size: 1.3rem; line-height: 1.5; }
      .options-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 0.75rem; }
      .option-button { border: 2px solid #e4defd; border-radius: 0.75rem; padding: 1rem; font-size: 1.1rem; background: #fff; cursor: pointer; }
      .option-button.correct { background: #d9f8e4; border-color: #22a45d; }
      .option-button.wrong { background: #fde2e2; border-color: #e04848; }
      .option-button:disabled { cursor: default; }
      .progress { color: #7a7799; margin-bottom: 0.5rem; }
      #feedback { min-height: 1.5rem; font-size: 1.2rem; font-weight: bold; }
      .error { color: #e04848; min-height: 1.25rem; }
      .score { font-size: 2.5rem; font-weight: bold; color: #6c4cf1; text-align: center; }
      .actions { display: flex; gap: 0.75rem; justify-content: center; margin-top: 1rem; }
    </style>
  </head>
  <body>
    <section class="card" id="profiles-card">
      <h1>Who is playing?</h1>
      <div id="profiles" class="grid"></div>
      <p id="profiles-error" class="error"></p>
    </section>
    <section class="card hidden" id="pin-card">
      <h2 id="pin-title">Enter your PIN</h2>
      <div id="pin-dots" class="pin-dots">____</div>
      <div id="keypad" class="keypad"></div>
      <p id="pin-error" class="error"></p>
      <div class="actions"><button class="secondary-button" id="pin-back">Back</button></div>
    </section>
    <section class="card hidden" id="activities-card">
      <h2 id="activities-title">Choose an activity</h2>
      <div id="activities" class="grid"></div>
      <p id="activities-error" class="error"></p>
      <div class="actions"><button class="secondary-button" id="activities-back">Switch profile</button></div>
    </section>
    <section class="card hidden" id="quiz-card">
      <div id="quiz-progress" class="progress"></div>
      <div id="question-container"></div>
      <div id="options-container" class="options-grid"></div>
      <p id="feedback"></p>
      <div class="actions"><button class="secondary-button" id="quiz-leave">Leave</button></div>
    </section>
    <section class="card hidden" id="complete-card">
      <h2>Well done!</h2>
      <p id="complete-summary"></p>
      <div id="complete-score" class="score"></div>
      <div class="actions">
        <button class="primary-button" id="complete-restart">Play again</button>
        <button class="secondary-button" id="complete-back">More activities</button>
      </div>
    </section>
    <script>
      const PIN_LENGTH = 4;
      const cards = ['profiles-card', 'pin-card', 'activities-card', 'quiz-card', 'complete-card'];
      let currentChild = null;
      let currentActivity = null;
      let pinDigits = '';
      let pollHandle = null;

      function show(cardId) {
        cards.forEach(id => document.getElementById(id).classList.toggle('hidden', id !== cardId));
      }

      async function api(method, path, body) {
        const options = { method, headers: { 'Content-Type': 'application/json' } };
        if (body !== undefined) {
          options.body = JSON.stringify(body);
        }
        const response = await fetch(path, options);
        const payload = await response.json().catch(() => ({}));
        if (!response.ok) {
          throw new Error(payload.detail || 'Something went wrong. Please try again later.');
        }
        return payload;
      }

      async function loadProfiles() {
        stopPolling();
        currentChild = null;
        currentActivity = null;
        show('profiles-card');
        const container = document.getElementById('profiles');
        const errorEl = document.getElementById('profiles-error');
        container.innerHTML = '';
        errorEl.textContent = '';
        try {
          const payload = await api('GET', '/children');
          if (payload.children.length === 0) {
            errorEl.textContent = 'Ask your teacher to add your profile.';
          }
          payload.children.forEach(child => {
            const tile = document.createElement('button');
            tile.className = 'tile';
            tile.innerHTML = `<img alt="" src="${child.avatar_url || ''}" /><span></span>`;
            tile.querySelector('span').textContent = child.name;
            tile.addEventListener('click', () => chooseChild(child));
            container.appendChild(tile);
          });
        } catch (error) {
          errorEl.textContent = error.message;
        }
      }

      async function chooseChild(child) {
        currentChild = child;
        if (child.has_pin) {
          pinDigits = '';
          renderPin();
          document.getElementById('pin-title').textContent = `Hi ${child.name}! Enter your PIN`;
          document.getElementById('pin-error').textContent = '';
          show('pin-card');
          return;
        }
        await unlock('');
      }

      function renderPin() {
        document.getElementById('pin-dots').textContent = '•'.repeat(pinDigits.length) + '_'.repeat(PIN_LENGTH - pinDigits.length);
      }

      function buildKeypad() {
        const keypad = document.getElementById('keypad');
        ['1', '2', '3', '4', '5', '6', '7', '8', '9', 'C', '0', '⌫'].forEach(label => {
          const key = document.createElement('button');
          key.className = 'key';
          key.textContent = label;
          key.addEventListener('click', () => pressKey(label));
          keypad.appendChild(key);
        });
      }

      async function pressKey(label) {
        if (label === 'C') {
          pinDigits = '';
        } else if (label === '⌫') {
          pinDigits = pinDigits.slice(0, -1);
        } else if (pinDigits.length < PIN_LENGTH) {
          pinDigits += label;
        }
        renderPin();
        if (pinDigits.length === PIN_LENGTH) {
          const pin = pinDigits;
          pinDigits = '';
          await unlock(pin);
          renderPin();
        }
      }

      async function unlock(pin) {
        try {
          await api('POST', `/children/${currentChild.id}/unlock`, { pin });
          await loadActivities();
        } catch (error) {
          document.getElementById('pin-error').textContent = error.message;
          if (!currentChild.has_pin) {
            document.getElementById('profiles-error').textContent = error.message;
          }
        }
      }

      async function loadActivities() {
        stopPolling();
        show('activities-card');
        document.getElementById('activities-title').textContent = `${currentChild.name}, choose an activity`;
        const container = document.getElementById('activities');
        const errorEl = document.getElementById('activities-error');
        container.innerHTML = '';
        errorEl.textContent = '';
        try {
          const payload = await api('GET', `/children/${currentChild.id}/activities`);
          if (payload.activities.length === 0) {
            errorEl.textContent = 'No activities yet.';
          }
          payload.activities.forEach(activity => {
            const tile = document.createElement('button');
            tile.className = 'tile';
            tile.textContent = `${activity.title} (${activity.question_count})`;
            tile.addEventListener('click', () => startActivity(activity));
            container.appendChild(tile);
          });
        } catch (error) {
          errorEl.textContent = error.message;
        }
      }

      function sessionPath() {
        return `/children/${currentChild.id}/activities/${currentActivity.id}/session`;
      }

      async function startActivity(activity) {
        currentActivity = activity;
        try {
          render(await api('POST', sessionPath()));
        } catch (error) {
          document.getElementById('activities-error').textContent = error.message;
        }
      }

      function render(state) {
        if (state.completed) {
          stopPolling();
          show('complete-card');
          document.getElementById('complete-summary').textContent =
            `You answered ${state.score.correct} of ${state.score.total} questions correctly.`;
          document.getElementById('complete-score').textContent = `${state.score.percentage}%`;
          return;
        }
        show('quiz-card');
        const question = state.question;
        document.getElementById('quiz-progress').textContent =
          `Question ${state.current_question_index + 1} of ${state.question_count}`;
        const questionContainer = document.getElementById('question-container');
        if (questionContainer.dataset.questionId !== question.id) {
          questionContainer.dataset.questionId = question.id;
          questionContainer.innerHTML = question.html;
        }
        const optionsContainer = document.getElementById('options-container');
        optionsContainer.innerHTML = '';
        question.options.forEach(option => {
          const button = document.createElement('button');
          button.className = 'option-button';
          button.textContent = option.text;
          button.disabled = state.show_feedback;
          if (state.show_feedback && option.id === state.selected_option_id) {
            button.classList.add(state.is_correct ? 'correct' : 'wrong');
          }
          button.addEventListener('click', () => answer(option.id));
          optionsContainer.appendChild(button);
        });
        const feedback = document.getElementById('feedback');
        if (state.show_feedback) {
          feedback.textContent = state.is_correct ? '✓ Great job!' : '✗ Not quite, keep going!';
          feedback.style.color = state.is_correct ? '#22a45d' : '#e04848';
          startPolling();
        } else {
          feedback.textContent = '';
          stopPolling();
        }
      }

      async function answer(optionId) {
        try {
          render(await api('POST', `${sessionPath()}/answer`, { option_id: optionId }));
        } catch (error) {
          document.getElementById('feedback').textContent = error.message;
        }
      }

      async function poll() {
        try {
          render(await api('GET', sessionPath()));
        } catch (error) {
          stopPolling();
          document.getElementById('feedback').textContent = error.message;
        }
      }

      function startPolling() {
        if (!pollHandle) {
          pollHandle = setInterval(poll, 500);
        }
      }

      function stopPolling() {
        if (pollHandle) {
          clearInterval(pollHandle);
          pollHandle = null;
        }
      }

      async function leave() {
        stopPolling();
        try {
          await api('DELETE', sessionPath());
        } catch (error) {
          console.error('Error leaving activity:', error);
        }
        await loadActivities();
      }

      document.getElementById('pin-back').addEventListener('click', loadProfiles);
      document.getElementById('activities-back').addEventListener('click', loadProfiles);
      document.getElementById('quiz-leave').addEventListener('click', leave);
      document.getElementById('complete-back').addEventListener('click', leave);
      document.getElementById('complete-restart').addEventListener('click', async () => {
        try {
          render(await api('POST', `${sessionPath()}/restart`));
        } catch (error) {
          document.getElementById('complete-summary').textContent = error.message;
        }
      });

      buildKeypad();
      loadProfiles();
    </script>
  </body>
</html>
"""


class UnlockPayload(BaseModel):
    """Payload schema for unlocking a child profile."""

    pin: str = ""


class AnswerPayload(BaseModel):
    """Payload schema for submitted answers."""

    option_id: str


def _status_for(exc: WaaiError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 400


def _child_payload(child: Child) -> dict[str, object]:
    avatar = get_avatar(child.avatar_id)
    return {
        "id": child.id,
        "name": child.name,
        "avatar_id": child.avatar_id,
        "avatar_url": avatar.url if avatar is not None else None,
        "has_pin": child.has_pin,
    }


def _activity_payload(activity: Activity) -> dict[str, object]:
    return {
        "id": activity.id,
        "title": activity.title,
        "goals": activity.goals,
        "question_count": activity.question_count,
        "cover_url": activity.cover_media.url if activity.cover_media is not None else None,
    }


def _session_payload(engine: QuizProgressEngine) -> dict[str, object]:
    state = engine.state
    question = engine.activity.questions[state.current_question_index]
    return {
        "activity_id": engine.activity.id,
        "current_question_index": state.current_question_index,
        "question_count": engine.activity.question_count,
        "question": {
            "id": question.id,
            "type": question.type.value,
            "text": question.text,
            "html": renderer.render_fragment(question.text),
            "media_url": question.media.url if question.media is not None else None,
            # correctness stays server-side
            "options": [{"id": option.id, "text": option.text} for option in question.options],
        },
        "selected_option_id": state.selected_option_id,
        "is_correct": state.is_correct,
        "show_feedback": state.show_feedback,
        "completed": state.completed,
        "score": {
            "correct": state.score.correct,
            "total": state.score.total,
            "percentage": state.score.percentage,
        },
    }


def _get_classroom_manager_dependency(classroom_manager: ClassroomManager):
    def dependency() -> ClassroomManager:
        return classroom_manager

    return dependency


def create_api_app(classroom_manager: ClassroomManager) -> FastAPI:
    """Create a FastAPI application wired to the provided classroom manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    manager_dep = _get_classroom_manager_dependency(classroom_manager)

    @app.exception_handler(WaaiError)
    def handle_waai_error(request: Request, exc: WaaiError) -> JSONResponse:
        return JSONResponse(status_code=_status_for(exc), content={"detail": exc.user_message})

    @app.get("/", response_class=HTMLResponse)
    def serve_child_page() -> str:
        return _CHILD_PAGE_HTML

    @app.get("/health")
    def get_health(manager: ClassroomManager = Depends(manager_dep)) -> dict[str, object]:
        return {"status": "ok", "teacher_signed_in": manager.is_signed_in()}

    @app.get("/children")
    def list_children(manager: ClassroomManager = Depends(manager_dep)) -> dict[str, object]:
        manager.context.require_teacher()
        return {"children": [_child_payload(child) for child in manager.get_children()]}

    @app.post("/children/{child_id}/unlock")
    def unlock_child(
        child_id: str,
        payload: UnlockPayload,
        manager: ClassroomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        child = manager.unlock_child(child_id, payload.pin or None)
        return {"unlocked": True, "child": _child_payload(child)}

    @app.get("/children/{child_id}/activities")
    def list_activities(
        child_id: str,
        manager: ClassroomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        activities = manager.get_activities_for_child(child_id)
        return {"activities": [_activity_payload(activity) for activity in activities]}

    @app.post("/children/{child_id}/activities/{activity_id}/session")
    def start_session(
        child_id: str,
        activity_id: str,
        manager: ClassroomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        manager.start_quiz(child_id, activity_id)
        return _session_payload(manager.get_quiz(child_id, activity_id))

    @app.get("/children/{child_id}/activities/{activity_id}/session")
    def get_session(
        child_id: str,
        activity_id: str,
        manager: ClassroomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return _session_payload(manager.get_quiz(child_id, activity_id))

    @app.post("/children/{child_id}/activities/{activity_id}/session/answer")
    def answer_question(
        child_id: str,
        activity_id: str,
        payload: AnswerPayload,
        manager: ClassroomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        manager.answer(child_id, activity_id, payload.option_id)
        return _session_payload(manager.get_quiz(child_id, activity_id))

    @app.post("/children/{child_id}/activities/{activity_id}/session/restart")
    def restart_session(
        child_id: str,
        activity_id: str,
        manager: ClassroomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        manager.restart_quiz(child_id, activity_id)
        return _session_payload(manager.get_quiz(child_id, activity_id))

    @app.delete("/children/{child_id}/activities/{activity_id}/session")
    def leave_session(
        child_id: str,
        activity_id: str,
        manager: ClassroomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        manager.leave_quiz(child_id, activity_id)
        return {"left": True}

    return app


def start_api_server(
    classroom_manager: ClassroomManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(classroom_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="WaaiApiServer", daemon=True)
    thread.start()
    return thread
