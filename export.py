import csv
import json
from datetime import datetime
from typing import Dict, List, Optional

from latency import DelayBreakdown, format_elapsed_time
from link import LinkModel, RenderState
from logging_config import setup_logger

logger = setup_logger(__name__)

# ============================================================================
# 1. RUN EXPORTER
# ============================================================================

class RunExporter:
    """
    Records the sampled states of one run and exports them
    """
    
    TRACE_HEADER = [
        "Tick", "Time (s)", "Elapsed", "Start (px)", "End (px)",
        "Start Fraction", "End Fraction",
    ]
    
    def __init__(self):
        self.configuration: Optional[dict] = None
        self.packet: Optional[dict] = None
        self.breakdown: Optional[DelayBreakdown] = None
        self.link_width: Optional[float] = None
        self.samples: List[RenderState] = []
        self.started_at: Optional[datetime] = None
    
    def start_run(self, model: LinkModel) -> None:
        """
        Capture the parameters of a run that has just started
        
        Args:
            model: LinkModel with a packet on the link
        """
        self.breakdown = model.delay_breakdown()
        self.configuration = model.configuration.to_dict()
        self.packet = model.packet.to_dict()
        self.link_width = model.link_width_px
        self.samples = []
        self.started_at = datetime.now()
    
    def record(self, state: Optional[RenderState]) -> None:
        """Add one sampled render state; idle samples are skipped"""
        if state is not None:
            self.samples.append(state)
    
    def has_run(self) -> bool:
        return self.breakdown is not None
    
    def get_summary(self) -> dict:
        """Summary of the recorded run"""
        if not self.has_run():
            return {}
        
        last_state = self.samples[-1] if self.samples else None
        last_time = last_state.current_time if last_state else 0.0
        return {
            "started_at": self.started_at.isoformat(),
            "link": self.configuration,
            "packet": self.packet,
            "link_width_px": self.link_width,
            "delays": self.breakdown.to_dict(),
            "samples": len(self.samples),
            "last_sample_time": format_elapsed_time(last_time),
            "last_sample": last_state.to_dict() if last_state else None,
        }
    
    def export_trace_to_csv(self, filename: str = None) -> bool:
        """
        Export the sampled packet positions to CSV
        
        Args:
            filename: Output filename (auto-generated if None)
        
        Returns:
            True if successful, False otherwise
        """
        if not filename:
            filename = f"trace_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
        
        if not self.samples:
            return False
        
        try:
            with open(filename, 'w', newline='') as f:
                writer = csv.writer(f)
                writer.writerow(self.TRACE_HEADER)
                
                for tick, state in enumerate(self.samples, start=1):
                    writer.writerow([
                        tick,
                        f"{state.current_time:.8f}",
                        state.elapsed_label,
                        f"{state.occupied_start:.2f}",
                        f"{state.occupied_end:.2f}",
                        f"{state.start_fraction:.4f}",
                        f"{state.end_fraction:.4f}",
                    ])
            
            logger.info(f"Trace exported to {filename}")
            return True
        
        except OSError as e:
            logger.error(f"Error exporting trace: {e}")
            return False
    
    def export_summary_to_json(self, filename: str = None) -> bool:
        """
        Export the run summary to JSON
        
        Args:
            filename: Output filename (auto-generated if None)
        
        Returns:
            True if successful, False otherwise
        """
        if not filename:
            filename = f"summary_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
        
        if not self.has_run():
            return False
        
        try:
            with open(filename, 'w') as f:
                json.dump(self.get_summary(), f, indent=2)
            
            logger.info(f"Summary exported to {filename}")
            return True
        
        except OSError as e:
            logger.error(f"Error exporting summary: {e}")
            return False
    
    def export_all(self, base_filename: str = None) -> Dict[str, bool]:
        """
        Export trace and summary
        
        Args:
            base_filename: Base name for files (timestamp used if None)
        
        Returns:
            Dictionary of export name -> success status
        """
        if not base_filename:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            base_filename = f"run_{timestamp}"
        
        results = {}
        results['trace'] = self.export_trace_to_csv(f"{base_filename}_trace.csv")
        results['summary'] = self.export_summary_to_json(f"{base_filename}_summary.json")
        
        return results
