# ============================================================================
# Transmission Delay vs. Propagation Delay Animator
# ============================================================================
# One packet, one point-to-point link: watch the bits go on the wire and
# travel to the receiver.
# ============================================================================

import argparse
import tkinter as tk
from tkinter import ttk, messagebox
from typing import Optional

from clock import DEFAULT_INTERVAL_MS, DEFAULT_STEP, SimulationClock
from export import RunExporter
from latency import DelayMetricsDisplay, PROPAGATION_SPEED
from link import LinkModel, LinkModelError, RenderState
from logging_config import setup_logger
from options import (
    LENGTH_OPTIONS, RATE_OPTIONS, SIZE_OPTIONS,
    ParameterSelector, RunParameters,
)

logger = setup_logger(__name__)

# ============================================================================
# 1. CONFIGURATION
# ============================================================================

class Config:
    """Global configuration constants"""
    
    # Window
    WINDOW_WIDTH = 700
    WINDOW_HEIGHT = 230
    WINDOW_TITLE = "Transmission delay versus propagation delay"
    BG_COLOR = "white"
    
    # Canvas settings
    CANVAS_WIDTH = 690
    CANVAS_HEIGHT = 110
    
    # Link geometry (canvas pixels)
    LINK_X = 80
    LINK_Y = 22
    LINK_WIDTH = 510
    LINK_HEIGHT = 18
    LINK_FILL = "white"
    LINK_OUTLINE = "black"
    PACKET_COLOR = "red"
    
    # Sender / receiver boxes
    HOST_WIDTH = 60
    HOST_HEIGHT = 35
    SENDER_X = 15
    RECEIVER_X = 597
    HOST_Y = 14
    HOST_COLOR = "lightblue"
    
    # Fonts
    LABEL_FONT = ("Calibri", 12, "bold")
    BUTTON_FONT = ("Arial", 10, "bold")
    CANVAS_FONT = ("Calibri", 11, "bold")
    
    # Animation
    TICK_STEP = DEFAULT_STEP
    TICK_INTERVAL_MS = DEFAULT_INTERVAL_MS


# ============================================================================
# 2. LINK RENDERER
# ============================================================================

class LinkRenderer:
    """Handles all Tkinter canvas drawing operations"""
    
    def __init__(self, canvas: tk.Canvas, model: LinkModel):
        self.canvas = canvas
        self.model = model
    
    def draw_host(self, x: int, label: str) -> None:
        """Draw a sender or receiver box with its label underneath"""
        self.canvas.create_rectangle(
            x, Config.HOST_Y,
            x + Config.HOST_WIDTH, Config.HOST_Y + Config.HOST_HEIGHT,
            fill=Config.HOST_COLOR, outline="black", width=2,
            tags="static"
        )
        self.canvas.create_text(
            x + Config.HOST_WIDTH / 2, Config.HOST_Y + Config.HOST_HEIGHT + 14,
            text=label, font=Config.CANVAS_FONT, fill="black",
            tags="static"
        )
    
    def draw_static(self) -> None:
        """Draw everything that does not move"""
        self.canvas.delete("static")
        self.draw_host(Config.SENDER_X, "Sender")
        self.draw_host(Config.RECEIVER_X, "Receiver")
        self.canvas.create_text(
            Config.LINK_X + 80, Config.CANVAS_HEIGHT - 20,
            text=f"Propagation speed : {PROPAGATION_SPEED / 1E8:g} x 10^8 m/sec",
            anchor="w", font=("Arial", 9), fill="black",
            tags="static"
        )
    
    def draw_link(self, state: Optional[RenderState]) -> None:
        """Draw the link, the packet on it and the elapsed time"""
        self.canvas.delete("link")
        
        x, y = Config.LINK_X, Config.LINK_Y
        self.canvas.create_rectangle(
            x, y, x + Config.LINK_WIDTH, y + Config.LINK_HEIGHT,
            fill=Config.LINK_FILL, outline=Config.LINK_OUTLINE,
            tags="link"
        )
        
        if state is not None and state.occupied_width > 0:
            self.canvas.create_rectangle(
                x + int(state.occupied_start), y + 1,
                x + int(state.occupied_end), y + Config.LINK_HEIGHT,
                fill=Config.PACKET_COLOR, outline="",
                tags="link"
            )
        
        self.canvas.create_text(
            x + Config.LINK_WIDTH / 2, y + Config.LINK_HEIGHT + 20,
            text=self.model.format_elapsed_time(),
            font=("Arial", 9), fill="black",
            tags="link"
        )
    
    def redraw_all(self) -> None:
        """Redraw entire canvas"""
        self.canvas.delete("all")
        self.draw_static()
        self.draw_link(self.model.render_state())


# ============================================================================
# 3. CONTROL PANEL
# ============================================================================

class ControlPanel:
    """Parameter selectors plus Start / Reset buttons"""
    
    def __init__(self, parent: tk.Frame, on_start, on_reset):
        self.frame = parent
        self.on_start = on_start
        self.on_reset = on_reset
        
        self._create_widgets()
    
    def _add_selector(self, text: str, selector: ParameterSelector) -> ttk.Combobox:
        tk.Label(self.frame, text=text, font=Config.LABEL_FONT,
                 bg=Config.BG_COLOR).pack(side=tk.LEFT, padx=(10, 4))
        var = tk.StringVar(value=selector.default.label)
        combo = ttk.Combobox(self.frame, textvariable=var, values=selector.labels,
                             state="readonly", width=9)
        combo.pack(side=tk.LEFT)
        combo.var = var
        return combo
    
    def _create_widgets(self) -> None:
        """Create all control panel widgets"""
        self.length_combo = self._add_selector("Length", LENGTH_OPTIONS)
        self.rate_combo = self._add_selector("Rate", RATE_OPTIONS)
        self.size_combo = self._add_selector("Packet size", SIZE_OPTIONS)
        
        self.start_button = tk.Button(self.frame, text="Start", command=self.on_start,
                                      font=Config.BUTTON_FONT, width=7)
        self.start_button.pack(side=tk.LEFT, padx=(12, 4))
        
        self.reset_button = tk.Button(self.frame, text="Reset", command=self.on_reset,
                                      font=Config.BUTTON_FONT, width=7)
        self.reset_button.pack(side=tk.LEFT, padx=4)
    
    def get_parameters(self) -> RunParameters:
        """Read the three selected values"""
        return RunParameters.from_labels(
            self.length_combo.var.get(),
            self.rate_combo.var.get(),
            self.size_combo.var.get(),
        )
    
    def set_enabled(self, enabled: bool) -> None:
        """Lock the selectors and Start button while a run is in progress"""
        combo_state = "readonly" if enabled else "disabled"
        for combo in (self.length_combo, self.rate_combo, self.size_combo):
            combo.config(state=combo_state)
        self.start_button.config(state=tk.NORMAL if enabled else tk.DISABLED)


# ============================================================================
# 4. MAIN WINDOW
# ============================================================================

class MainWindow(tk.Tk):
    """Main application window"""
    
    def __init__(self):
        super().__init__()
        
        self.title(Config.WINDOW_TITLE)
        self.geometry(f"{Config.WINDOW_WIDTH}x{Config.WINDOW_HEIGHT}")
        self.configure(bg=Config.BG_COLOR)
        
        self.model = LinkModel(link_width_px=Config.LINK_WIDTH)
        self.exporter = RunExporter()
        self.clock = SimulationClock(
            self.model,
            scheduler=self,
            step=Config.TICK_STEP,
            interval_ms=Config.TICK_INTERVAL_MS,
            on_tick=self._on_tick,
            on_finished=self._on_finished,
            on_start=lambda: self.exporter.start_run(self.model),
        )
        
        self._create_layout()
        self.link_renderer.redraw_all()
        
        self.protocol("WM_DELETE_WINDOW", self.on_closing)
    
    def _create_layout(self) -> None:
        """Create main window layout"""
        
        # ========== MENU BAR ==========
        menubar = tk.Menu(self)
        self.config(menu=menubar)
        
        file_menu = tk.Menu(menubar, tearoff=0)
        menubar.add_cascade(label="File", menu=file_menu)
        file_menu.add_command(label="Export Run", command=self._on_export)
        file_menu.add_separator()
        file_menu.add_command(label="Exit", command=self.on_closing)
        
        # ========== TOP: CONTROLS ==========
        top_frame = tk.Frame(self, bg=Config.BG_COLOR)
        top_frame.pack(side=tk.TOP, fill=tk.X, pady=8)
        self.control_panel = ControlPanel(top_frame, self._on_start, self._on_reset)
        
        # ========== BOTTOM: METRICS ==========
        self.metrics_label = tk.Label(self, text="", font=("Courier", 8),
                                      bg=Config.BG_COLOR, anchor="w")
        self.metrics_label.pack(side=tk.BOTTOM, fill=tk.X, padx=10, pady=(0, 4))
        self.metrics_display = DelayMetricsDisplay(self.metrics_label)
        self.metrics_display.update_display(None)

        # ========== CENTER: CANVAS ==========
        self.canvas = tk.Canvas(self, bg=Config.BG_COLOR,
                                width=Config.CANVAS_WIDTH, height=Config.CANVAS_HEIGHT,
                                highlightthickness=0)
        self.canvas.pack(fill=tk.BOTH, expand=True)
        self.link_renderer = LinkRenderer(self.canvas, self.model)

    def _on_start(self) -> None:
        """Configure the link, send the packet and start ticking"""
        try:
            params = self.control_panel.get_parameters()
            self.clock.start(params)
        except (LinkModelError, KeyError, ValueError) as e:
            logger.error(f"Could not start run: {e}")
            messagebox.showerror("Error", str(e))
            return
        
        self.control_panel.set_enabled(False)
        self.metrics_display.update_display(self.model.delay_breakdown())
        self.link_renderer.draw_link(self.model.render_state())
    
    def _on_reset(self) -> None:
        self.clock.reset()
        self.control_panel.set_enabled(True)
        self.metrics_display.update_display(None)
    
    def _on_tick(self, state: Optional[RenderState]) -> None:
        """Called by the clock after every model update"""
        self.exporter.record(state)
        self.link_renderer.draw_link(state)
    
    def _on_finished(self) -> None:
        self.control_panel.set_enabled(True)
    
    def _on_export(self) -> None:
        """Export the last run to CSV and JSON"""
        if not self.exporter.has_run():
            messagebox.showinfo("Export Run", "Start a run first.")
            return
        
        results = self.exporter.export_all()
        if all(results.values()):
            messagebox.showinfo("Export Run", "Trace and summary exported.")
        else:
            failed = ", ".join(name for name, ok in results.items() if not ok)
            messagebox.showerror("Export Run", f"Export failed: {failed}")
    
    def on_closing(self) -> None:
        """Clean up when window closes"""
        self.clock.stop()
        self.destroy()


# ============================================================================
# 5. HEADLESS RUN
# ============================================================================

def run_headless(params: RunParameters, export_base: str = None) -> int:
    """
    Run one simulation without a window and print the result
    
    Args:
        params: Run parameters
        export_base: Base filename for trace/summary export (skipped if None)
    
    Returns:
        Process exit code
    """
    model = LinkModel(link_width_px=Config.LINK_WIDTH)
    exporter = RunExporter()
    clock = SimulationClock(
        model,
        step=Config.TICK_STEP,
        on_tick=exporter.record,
        on_start=lambda: exporter.start_run(model),
    )

    clock.run_to_completion(params)
    breakdown = exporter.breakdown

    print(f"Transmission delay: {model.format_elapsed_time(breakdown.transmission_delay)}")
    print(f"Propagation delay:  {model.format_elapsed_time(breakdown.propagation_delay)}")
    print(f"Total time:         {model.format_elapsed_time(breakdown.total_time)}")
    print(f"Ticks:              {clock.tick_count} ({model.format_elapsed_time(clock.elapsed)})")
    
    if export_base:
        results = exporter.export_all(export_base)
        if not all(results.values()):
            return 1
    return 0


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=Config.WINDOW_TITLE)
    parser.add_argument("--headless", action="store_true",
                        help="run once without a window and print the delays")
    parser.add_argument("--length", choices=LENGTH_OPTIONS.labels,
                        default=LENGTH_OPTIONS.default.label)
    parser.add_argument("--rate", choices=RATE_OPTIONS.labels,
                        default=RATE_OPTIONS.default.label)
    parser.add_argument("--size", choices=SIZE_OPTIONS.labels,
                        default=SIZE_OPTIONS.default.label)
    parser.add_argument("--export", metavar="BASE",
                        help="with --headless, write BASE_trace.csv and BASE_summary.json")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    
    if args.headless:
        params = RunParameters.from_labels(args.length, args.rate, args.size)
        return run_headless(params, args.export)
    
    app = MainWindow()
    app.mainloop()
    return 0


# ============================================================================
# 6. MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    raise SystemExit(main())
