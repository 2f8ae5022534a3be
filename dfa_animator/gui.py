from __future__ import annotations

import logging
from typing import List, Optional

import tkinter as tk
from tkinter import filedialog, messagebox

from .automata import AutomatonError
from .config import (
    AnimatorSettings,
    Session,
    build_session_from_payload,
    example_session,
    load_payload_from_file,
)
from .engine import ExecutionEngine, Playback, RunState
from .geometry import quadratic_points
from .layout import ACCEPT_RING, EDGE_COLOR, OUTLINE, LoopEdge, layout_frame
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

APP_TITLE = "Automaton Simulation"
LOG_SEPARATOR = " | "
STATE_FONT = ("Arial", 18)
EDGE_FONT = ("Arial", 14)


class AutomatonStudio(tk.Tk):
    def __init__(self, session: Optional[Session] = None, settings: Optional[AnimatorSettings] = None) -> None:
        super().__init__()
        self.settings = settings or AnimatorSettings()
        self.title(APP_TITLE)
        self.minsize(self.settings.canvas_width + 40, self.settings.canvas_height + 220)

        self.word_var = tk.StringVar(value="")
        self.status_var = tk.StringVar(value="Type a word and press Validate.")

        self._tick_after: Optional[str] = None
        self._playback: Optional[Playback] = None
        self._unsubscribe = None

        self._build_ui()
        self._load_session(session or example_session())
        self.protocol("WM_DELETE_WINDOW", self._on_close)

    # ---------------------------------------------------------------
    def _build_ui(self) -> None:
        self.body = tk.Frame(self, bd=0)
        self.body.pack(fill="both", expand=True, padx=16, pady=16)
        self.body.columnconfigure(1, weight=1)

        tk.Label(self.body, text=APP_TITLE, font=("Arial", 16, "bold")).grid(
            row=0, column=0, columnspan=3, sticky="w", pady=(0, 8)
        )

        tk.Label(self.body, text="Word to validate:").grid(row=1, column=0, sticky="w")
        self.word_entry = tk.Entry(self.body, textvariable=self.word_var)
        self.word_entry.grid(row=1, column=1, sticky="ew", padx=(4, 8))
        self.word_entry.bind("<Return>", lambda event: self.validate_word())

        self.validate_button = tk.Button(self.body, text="Validate", command=self.validate_word, padx=12)
        self.validate_button.grid(row=1, column=2, sticky="ew")

        self.open_button = tk.Button(self.body, text="Open config...", command=self._open_config, padx=12)
        self.open_button.grid(row=2, column=2, sticky="ew", pady=(8, 0))

        tk.Label(self.body, text="Logs:").grid(row=2, column=0, sticky="nw", pady=(8, 0))
        self.log_text = tk.Text(self.body, height=5, wrap="word", state="disabled")
        self.log_text.grid(row=2, column=1, sticky="ew", padx=(4, 8), pady=(8, 0))

        self.canvas = tk.Canvas(
            self.body,
            width=self.settings.canvas_width,
            height=self.settings.canvas_height,
            bg="#ffffff",
            highlightthickness=0,
        )
        self.canvas.grid(row=3, column=0, columnspan=3, pady=(12, 0))

        self.status_bar = tk.Label(self, textvariable=self.status_var, anchor="w", padx=16, pady=6)
        self.status_bar.pack(fill="x", side="bottom")

    def _load_session(self, session: Session) -> None:
        self._cancel_tick()
        if self._unsubscribe is not None:
            self._unsubscribe()
        self.session = session
        self.engine = ExecutionEngine(session.automaton, delay=self.settings.step_delay)
        # subscribe() delivers the initial state, which draws the first frame.
        self._unsubscribe = self.engine.subscribe(self._on_state)

    # ---------------------------------------------------------------
    def validate_word(self) -> None:
        self._cancel_tick()
        word = self.word_var.get()
        # The shell paces ticks itself with after().
        self._playback = self.engine.run(word, delay=0.0)
        self.status_var.set(f"Validating '{word}'..." if word else "Validating the empty word...")
        self._tick()

    def _tick(self) -> None:
        self._tick_after = None
        playback = self._playback
        if playback is None or playback.cancelled:
            return
        event = playback.step()
        if event is not None:
            delay_ms = int(self.settings.step_delay * 1000)
            self._tick_after = self.after(delay_ms, self._tick)
            return
        verdict = playback.verdict
        if verdict is not None:
            self.status_var.set(f"Finished in state {verdict.state}: {verdict.message}.")
            messagebox.showinfo(APP_TITLE, verdict.message, parent=self)

    def _cancel_tick(self) -> None:
        if self._tick_after is not None:
            self.after_cancel(self._tick_after)
            self._tick_after = None

    def _on_state(self, state: RunState) -> None:
        self._update_log(state.log_lines)
        self._redraw(state.current)

    def _update_log(self, lines: List[str]) -> None:
        self.log_text.configure(state="normal")
        self.log_text.delete("1.0", "end")
        self.log_text.insert("1.0", LOG_SEPARATOR.join(lines))
        self.log_text.configure(state="disabled")

    # ---------------------------------------------------------------
    def _redraw(self, current: Optional[str]) -> None:
        frame = layout_frame(self.session.automaton, current, self.session.drawing_radius(self.settings))
        canvas = self.canvas
        canvas.delete("all")

        for node in frame.nodes:
            cx, cy, r = node.center.x, node.center.y, node.radius
            canvas.create_oval(cx - r, cy - r, cx + r, cy + r, fill=node.fill, outline=OUTLINE, width=2)
            if node.ring_radius is not None:
                rr = node.ring_radius
                canvas.create_oval(cx - rr, cy - rr, cx + rr, cy + rr, outline=ACCEPT_RING, width=4)
            canvas.create_text(
                node.label_anchor.x, node.label_anchor.y, text=node.state, anchor="nw", font=STATE_FONT
            )

        for edge in frame.edges:
            if isinstance(edge, LoopEdge):
                points = quadratic_points(edge.start, edge.control, edge.end)
                coords = [value for point in points for value in point]
                canvas.create_line(*coords, fill=EDGE_COLOR, width=2, smooth=True)
            else:
                canvas.create_line(
                    edge.start.x, edge.start.y, edge.end.x, edge.end.y, fill=EDGE_COLOR, width=2
                )
            for barb in edge.head:
                canvas.create_line(
                    barb.start.x, barb.start.y, barb.end.x, barb.end.y, fill=EDGE_COLOR, width=2
                )
            canvas.create_text(
                edge.label_anchor.x,
                edge.label_anchor.y,
                text=edge.transition.symbol,
                anchor="nw",
                font=EDGE_FONT,
            )

    # ---------------------------------------------------------------
    def _open_config(self) -> None:
        path = filedialog.askopenfilename(
            parent=self, filetypes=[("JSON files", "*.json"), ("All files", "*.*")]
        )
        if not path:
            return
        try:
            session = build_session_from_payload(load_payload_from_file(path))
        except (AutomatonError, ValueError, OSError) as exc:
            logger.error("Could not load %s: %s", path, exc)
            messagebox.showerror(APP_TITLE, str(exc), parent=self)
            return
        self.engine.cancel()
        self._load_session(session)
        self.status_var.set(f"Loaded {path}.")

    def _on_close(self) -> None:
        self._cancel_tick()
        self.engine.cancel()
        self.destroy()


def run_gui(
    session: Optional[Session] = None,
    settings: Optional[AnimatorSettings] = None,
    log_file: Optional[str] = None,
) -> int:
    settings = settings or AnimatorSettings()
    setup_logging(settings.log_level, log_file)
    app = AutomatonStudio(session, settings)
    app.mainloop()
    return 0
