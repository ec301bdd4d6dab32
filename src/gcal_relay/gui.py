"""Tkinter desktop client for the calendar relay.

Features:
- Sign in with Google (local OAuth flow), then list upcoming events through the relay
- Create a one-hour event from a name, date and time
- Remembers the session between runs and re-checks it on start-up

All widgets are driven from the controller state; network work runs on daemon
threads and results are rendered back on the Tk thread.
"""
import logging
import threading
import tkinter as tk
from tkinter import ttk
from typing import Any, Callable, Dict, Optional

from gcal_relay.auth.google_oauth import run_local_oauth_flow
from gcal_relay.auth.session import SessionStore, make_validator
from gcal_relay.client.controller import AppController
from gcal_relay.client.relay_client import RelayClient
from gcal_relay.client.state import AppState, Loading, SignedIn
from gcal_relay.config import settings

logger = logging.getLogger(__name__)

NOTICE_CLEAR_MS = 4000
NOTICE_COLORS = {'success': '#4caf50', 'error': '#ef5350', 'info': '#bfbfbf'}


class CalendarGUI(tk.Tk):
    def __init__(self, controller: Optional[AppController] = None):
        super().__init__()
        self.title("Google Calendar Integration")
        self.geometry("760x520")

        if controller is None:
            relay = RelayClient(settings.RELAY_URL, timeout=settings.REQUEST_TIMEOUT_SECONDS)
            controller = AppController(
                relay=relay,
                store=SessionStore(settings.SESSION_STORE_PATH),
                validator=make_validator(settings, relay),
                authorize=run_local_oauth_flow,
            )
        self.controller = controller
        self.controller.notify = self._notify
        self.controller.subscribe(self._schedule_render)

        self._dialog: Optional[tk.Toplevel] = None
        self._draft_vars: Dict[str, tk.StringVar] = {}
        self._syncing = False
        self._notice_job = None

        self._build_ui()
        self._apply_dark_theme()
        self._render(self.controller.state)
        self._run_in_background(self.controller.initialize)

    def _build_ui(self):
        header = ttk.Frame(self)
        header.pack(fill=tk.X, padx=10, pady=10)
        ttk.Label(header, text="Google Calendar Integration", style="Title.TLabel").pack(side=tk.LEFT)

        # Right side of the header swaps between the two modes
        self.signed_out_bar = ttk.Frame(header)
        ttk.Button(self.signed_out_bar, text="Sign in with Google", command=self._on_sign_in).pack(side=tk.RIGHT)

        self.signed_in_bar = ttk.Frame(header)
        ttk.Button(self.signed_in_bar, text="Logout", command=self._on_sign_out).pack(side=tk.RIGHT, padx=(6, 0))
        ttk.Button(self.signed_in_bar, text="Create Event", command=self.controller.open_form).pack(side=tk.RIGHT, padx=(6, 0))
        self.welcome_label = ttk.Label(self.signed_in_bar, text="")
        self.welcome_label.pack(side=tk.RIGHT, padx=(0, 6))

        self.loading_label = ttk.Label(self, text="Loading...", style="Muted.TLabel")

        self.events_frame = ttk.Frame(self)
        ttk.Label(self.events_frame, text="Your Events").pack(anchor=tk.W, pady=(0, 4))
        columns = ('name', 'date', 'time')
        self.events_tree = ttk.Treeview(self.events_frame, columns=columns, show='headings', height=12)
        for column, heading in zip(columns, ('Event Name', 'Date', 'Time')):
            self.events_tree.heading(column, text=heading, anchor=tk.W)
        self.events_tree.column('name', width=360)
        self.events_tree.column('date', width=140)
        self.events_tree.column('time', width=100)
        self.events_tree.pack(fill=tk.BOTH, expand=True)

        self.status_label = tk.Label(self, text="", anchor=tk.W)
        self.status_label.pack(side=tk.BOTTOM, fill=tk.X, padx=10, pady=(0, 8))

    # ---- background helpers ------------------------------------------------
    def _run_in_background(self, target: Callable[[], Any]):
        def _worker():
            try:
                target()
            except Exception as exc:
                logger.exception('Background action failed: %s', exc)
                self._notify('error', str(exc))

        t = threading.Thread(target=_worker)
        t.daemon = True
        t.start()

    def _notify(self, level: str, message: str):
        self.after(0, self._show_notice, level, message)

    def _show_notice(self, level: str, message: str):
        self.status_label.configure(text=message, fg=NOTICE_COLORS.get(level, NOTICE_COLORS['info']))
        if self._notice_job is not None:
            self.after_cancel(self._notice_job)
        self._notice_job = self.after(NOTICE_CLEAR_MS, self._clear_notice)

    def _clear_notice(self):
        self._notice_job = None
        self.status_label.configure(text="")

    # ---- actions -----------------------------------------------------------
    def _on_sign_in(self):
        self._run_in_background(self.controller.login)

    def _on_sign_out(self):
        self.controller.logout()

    def _on_submit(self):
        self._run_in_background(self.controller.submit_event)

    # ---- rendering ---------------------------------------------------------
    def _schedule_render(self, _state: Optional[AppState] = None):
        # Render whatever the controller holds when the callback runs
        self.after(0, self._render_latest)

    def _render_latest(self):
        self._render(self.controller.state)

    def _render(self, state: AppState):
        for widget in (self.loading_label, self.events_frame, self.signed_in_bar, self.signed_out_bar):
            widget.pack_forget()

        if isinstance(state, Loading):
            self.loading_label.pack(expand=True)
            self._sync_dialog(None)
            return

        if not isinstance(state, SignedIn):
            self.signed_out_bar.pack(side=tk.RIGHT)
            self._sync_dialog(None)
            return

        self.signed_in_bar.pack(side=tk.RIGHT)
        self.welcome_label.configure(text=f"Welcome, {state.session.display_name}!")
        self.events_frame.pack(fill=tk.BOTH, expand=True, padx=10)

        self.events_tree.delete(*self.events_tree.get_children())
        for event in state.events:
            self.events_tree.insert('', tk.END, values=(event.name, event.date, event.time))
        if not state.events:
            self.events_tree.insert('', tk.END, values=("No events created yet.", "", ""))

        self._sync_dialog(state)

    def _sync_dialog(self, state: Optional[SignedIn]):
        if state is None or not state.modal_open:
            if self._dialog is not None:
                self._dialog.destroy()
                self._dialog = None
                self._draft_vars = {}
            return

        if self._dialog is None:
            self._open_dialog()
        # Keep entries in step with the draft, e.g. after a reset
        self._syncing = True
        try:
            for field, var in self._draft_vars.items():
                value = getattr(state.draft, field)
                if var.get() != value:
                    var.set(value)
        finally:
            self._syncing = False

    def _on_var_write(self, field: str, var: Any):
        if self._syncing:
            return
        self.controller.edit_draft(field, var.get())

    def _open_dialog(self):
        dialog = tk.Toplevel(self)
        dialog.title("Create New Event")
        dialog.geometry("420x260")
        dialog.transient(self)
        dialog.configure(bg=self._panel_bg)
        dialog.protocol("WM_DELETE_WINDOW", self.controller.close_form)

        for field, label in (('name', "Event Name"), ('date', "Date (YYYY-MM-DD)"), ('time', "Time (HH:MM)")):
            ttk.Label(dialog, text=label).pack(anchor=tk.W, padx=10, pady=(10, 0))
            var = tk.StringVar(master=dialog)
            var.trace_add('write', lambda *_, f=field, v=var: self._on_var_write(f, v))
            entry = tk.Entry(dialog, textvariable=var, width=40, bg="#121212", fg=self._fg, insertbackground=self._fg)
            entry.pack(fill=tk.X, padx=10)
            self._draft_vars[field] = var

        btn_frame = ttk.Frame(dialog)
        btn_frame.pack(fill=tk.X, padx=10, pady=10, side=tk.BOTTOM)
        ttk.Button(btn_frame, text="Create Event", command=self._on_submit).pack(side=tk.RIGHT, padx=(5, 0))
        ttk.Button(btn_frame, text="Cancel", command=self.controller.close_form).pack(side=tk.RIGHT)

        self._dialog = dialog

    def _apply_dark_theme(self):
        """Apply a simple dark theme to ttk widgets and native widgets used."""
        bg = "#1f1f1f"
        panel_bg = "#2b2b2b"
        fg = "#e6e6e6"
        muted = "#bfbfbf"
        accent = "#3399ff"

        self._bg = bg
        self._panel_bg = panel_bg
        self._fg = fg

        self.configure(bg=bg)

        style = ttk.Style(self)
        if "clam" in style.theme_names():
            style.theme_use("clam")

        style.configure("TFrame", background=panel_bg)
        style.configure("TLabel", background=panel_bg, foreground=fg)
        style.configure("Title.TLabel", background=panel_bg, foreground=fg, font=("TkDefaultFont", 14, "bold"))
        style.configure("Muted.TLabel", background=panel_bg, foreground=muted)
        style.configure("TButton", background=panel_bg, foreground=fg)
        style.map("TButton",
                  background=[("active", accent)],
                  foreground=[("active", "#ffffff")])
        style.configure("Treeview", background="#121212", fieldbackground="#121212", foreground=fg)
        style.configure("Treeview.Heading", background=panel_bg, foreground=muted)

        self.status_label.configure(bg=bg)


def run_gui():
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(name)-24s %(levelname)-7s %(message)s",
    )
    app = CalendarGUI()
    app.mainloop()


if __name__ == '__main__':
    run_gui()
