"""Edit dialog for a single saved place."""

import tkinter as tk
from tkinter import ttk
from typing import Callable

from ..edit_session import EditSession
from ..nearby import LoadingStatus


class EditDialog:
    """Name/description form plus the list of places nearby."""

    def __init__(self, parent: tk.Misc, session: EditSession, on_close: Callable[[], None]):
        self.session = session
        self.on_close = on_close

        self.window = tk.Toplevel(parent)
        self.window.title("Place details")
        self.window.geometry("420x480")
        self.window.transient(parent)
        self.window.protocol("WM_DELETE_WINDOW", self.close)

        form = ttk.Frame(self.window, padding=12)
        form.pack(fill=tk.BOTH, expand=True)

        ttk.Label(form, text="Place name").pack(anchor=tk.W)
        self.name_var = tk.StringVar(value=session.name)
        ttk.Entry(form, textvariable=self.name_var).pack(fill=tk.X, pady=(0, 8))

        ttk.Label(form, text="Description").pack(anchor=tk.W)
        self.description_var = tk.StringVar(value=session.description)
        ttk.Entry(form, textvariable=self.description_var).pack(fill=tk.X, pady=(0, 12))

        ttk.Label(form, text="Nearby...", font=("TkDefaultFont", 10, "bold")).pack(anchor=tk.W)
        self.nearby_text = tk.Text(form, height=14, wrap=tk.WORD, relief=tk.FLAT)
        self.nearby_text.tag_configure("title", font=("TkDefaultFont", 10, "bold"))
        self.nearby_text.tag_configure("description", font=("TkDefaultFont", 10, "italic"))
        self.nearby_text.pack(fill=tk.BOTH, expand=True)

        ttk.Button(form, text="Save", command=self.save).pack(anchor=tk.E, pady=(8, 0))

        self._unsubscribe = session.subscribe(self.on_session_changed)
        self.render_nearby()

    def on_session_changed(self, attribute: str):
        if attribute == "loading_state" and self.window.winfo_exists():
            self.render_nearby()

    def render_nearby(self):
        state = self.session.loading_state
        self.nearby_text.config(state=tk.NORMAL)
        self.nearby_text.delete("1.0", tk.END)
        if state.status is LoadingStatus.LOADING:
            self.nearby_text.insert(tk.END, "Loading...")
        elif state.status is LoadingStatus.FAILED:
            self.nearby_text.insert(tk.END, "Please try again later.")
        else:
            for page in state.pages:
                self.nearby_text.insert(tk.END, page.title, "title")
                self.nearby_text.insert(tk.END, ": ")
                self.nearby_text.insert(tk.END, page.description, "description")
                self.nearby_text.insert(tk.END, "\n")
        self.nearby_text.config(state=tk.DISABLED)

    def save(self):
        self.session.name = self.name_var.get()
        self.session.description = self.description_var.get()
        self.session.save()
        self.close()

    def close(self):
        self._unsubscribe()
        self.window.destroy()
        self.on_close()
