#!/usr/bin/env python3
"""
BucketList GUI - a private map of the places you want to visit.

This GUI allows you to:
- Unlock your saved places with a passcode
- Click on an OpenStreetMap to drop a new pin
- Click a pin to rename it, describe it and see what is nearby
- Switch between standard and hybrid map imagery
"""

import asyncio
import queue
import sys
import threading
import traceback
from typing import Dict, Optional
from uuid import UUID

import tkinter as tk
from tkinter import messagebox, simpledialog
from tkintermapview import TkinterMapView

from .. import config
from ..auth import PasscodeAuthenticator
from ..location import Coordinate, Location
from ..view_model import MapViewModel
from .edit_dialog import EditDialog

# How often queued state changes are applied on the Tk thread (ms)
UI_POLL_INTERVAL = 50


class BucketListGUI:
    """Lock screen and map for the saved places."""

    def __init__(self):
        self.root = tk.Tk()
        self.root.title("BucketList")
        self.root.geometry("1200x800")

        # State changes from async work are queued and applied on the Tk thread
        self.ui_queue: "queue.Queue" = queue.Queue()

        # Async work (authentication, nearby lookups) runs on its own loop
        self.loop = asyncio.new_event_loop()
        self.loop_thread = threading.Thread(target=self.loop.run_forever, daemon=True)
        self.loop_thread.start()

        authenticator = PasscodeAuthenticator(prompt=self.ask_passcode)
        self.view_model = MapViewModel(authenticator, dispatch=self.ui_queue.put)
        self.view_model.subscribe(self.on_state_changed)

        self.markers: Dict[UUID, object] = {}
        self.edit_dialog: Optional[EditDialog] = None

        self.setup_ui()
        self.root.after(UI_POLL_INTERVAL, self.drain_ui_queue)

    def setup_ui(self):
        """Build the lock screen and the (hidden) map screen."""
        self.lock_frame = tk.Frame(self.root)
        self.lock_frame.pack(fill=tk.BOTH, expand=True)
        self.unlock_button = tk.Button(self.lock_frame, text="Unlock places", command=self.unlock,
                                       bg="#1976D2", fg="#ffffff", relief=tk.FLAT,
                                       padx=20, pady=10, cursor="hand2")
        self.unlock_button.place(relx=0.5, rely=0.5, anchor=tk.CENTER)

        self.map_frame = tk.Frame(self.root)
        self.map_frame.rowconfigure(1, weight=1)
        self.map_frame.columnconfigure(0, weight=1)

        toolbar = tk.Frame(self.map_frame)
        toolbar.grid(row=0, column=0, sticky=(tk.W, tk.E))
        self.style_button = tk.Button(toolbar, text="🌐 Map style", command=self.toggle_map_style,
                                      relief=tk.FLAT, padx=12, pady=6, cursor="hand2")
        self.style_button.pack(side=tk.RIGHT, padx=12, pady=4)
        self.count_label = tk.Label(toolbar, text="")
        self.count_label.pack(side=tk.LEFT, padx=12)

        self.map_widget = TkinterMapView(self.map_frame, corner_radius=0)
        self.map_widget.grid(row=1, column=0, sticky=(tk.W, tk.E, tk.N, tk.S))
        self.map_widget.set_tile_server(config.TILE_SERVERS[self.view_model.map_style])
        self.map_widget.set_position(*config.start_position)
        self.map_widget.set_zoom(config.start_zoom)

        if sys.platform == "darwin":  # macOS
            self.map_widget.bind("<MouseWheel>", self._on_mousewheel)
            self.map_widget.bind("<Shift-MouseWheel>", self._on_mousewheel)
        else:  # Windows/Linux
            self.map_widget.bind("<MouseWheel>", self._on_mousewheel)
            self.map_widget.bind("<Button-4>", self._on_mousewheel)
            self.map_widget.bind("<Button-5>", self._on_mousewheel)

        self.map_widget.add_left_click_map_command(self.map_click_event)

    def _on_mousewheel(self, event):
        """Handle mousewheel/trackpad zoom events."""
        current_zoom = self.map_widget.zoom
        if event.num == 5 or event.delta < 0:
            new_zoom = max(0, current_zoom - 1)
        else:
            new_zoom = min(19, current_zoom + 1)
        if new_zoom != current_zoom:
            self.map_widget.set_zoom(new_zoom)

    def run_async(self, coro):
        """Schedule a coroutine on the background loop."""
        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        future.add_done_callback(self._report_async_error)
        return future

    @staticmethod
    def _report_async_error(future):
        if not future.cancelled() and future.exception() is not None:
            traceback.print_exception(future.exception())

    def drain_ui_queue(self):
        """Apply queued state changes on the Tk thread."""
        try:
            while True:
                self.ui_queue.get_nowait()()
        except queue.Empty:
            pass
        except Exception as e:
            print(f"Error applying UI update: {e}")
            traceback.print_exc()
        self.root.after(UI_POLL_INTERVAL, self.drain_ui_queue)

    async def ask_passcode(self, reason: str) -> Optional[str]:
        """Show the passcode prompt on the Tk thread and wait for the answer."""
        answer = self.loop.create_future()

        def ask():
            value = simpledialog.askstring("Unlock", reason, show="*", parent=self.root)
            self.loop.call_soon_threadsafe(answer.set_result, value)

        self.ui_queue.put(ask)
        return await answer

    def unlock(self):
        self.run_async(self.view_model.authenticate())

    def on_state_changed(self, attribute: str):
        if attribute == "is_unlocked":
            if self.view_model.is_unlocked:
                self.show_map()
            else:
                self.show_lock_screen()
        elif attribute == "pending_alert":
            alert = self.view_model.pending_alert
            if alert is not None:
                messagebox.showerror(alert.title, alert.message, parent=self.root)
                self.view_model.dismiss_alert()
        elif attribute == "locations":
            self.refresh_markers()
        elif attribute == "map_style":
            self.map_widget.set_tile_server(config.TILE_SERVERS[self.view_model.map_style])

    def show_map(self):
        self.lock_frame.pack_forget()
        self.map_frame.pack(fill=tk.BOTH, expand=True)
        self.refresh_markers()

    def show_lock_screen(self):
        self.map_frame.pack_forget()
        self.lock_frame.pack(fill=tk.BOTH, expand=True)

    def refresh_markers(self):
        """Redraw one marker per saved location."""
        for marker in self.markers.values():
            marker.delete()
        self.markers = {}
        for location in self.view_model.locations:
            self.markers[location.id] = self.map_widget.set_marker(
                location.latitude, location.longitude, text=location.name,
                marker_color_circle="#ffffff", marker_color_outside="#E53935",
                command=self.marker_click_event, data=location,
            )
        self.count_label.config(text=f"Places: {len(self.markers)}")

    def map_click_event(self, coords):
        """Drop a new pin where the map was clicked."""
        latitude, longitude = coords
        self.view_model.add_location(Coordinate(latitude, longitude))

    def marker_click_event(self, marker):
        """Open the edit dialog for the clicked pin."""
        if self.edit_dialog is not None:
            return
        location: Location = marker.data
        session = self.view_model.edit_session(location)
        self.edit_dialog = EditDialog(self.root, session, on_close=self.on_edit_closed)
        self.run_async(session.load_nearby())

    def on_edit_closed(self):
        self.edit_dialog = None
        self.view_model.select(None)

    def toggle_map_style(self):
        self.view_model.toggle_map_style()

    def run(self):
        """Start the GUI main loop."""
        self.root.protocol("WM_DELETE_WINDOW", self.on_closing)
        self.root.mainloop()

    def on_closing(self):
        """Handle window closing."""
        self.loop.call_soon_threadsafe(self.loop.stop)
        self.loop_thread.join(timeout=1.0)
        self.root.destroy()
