# happydb/messages/pipeline_messages.py

PIPELINE_STARTED = "Verbosity analysis started."
PIPELINE_COMPLETED = "Verbosity analysis completed."
PIPELINE_FAILED = "Verbosity analysis failed at stage '{stage}': {error}"
STEP_COMPLETED = "✅ Step {step} completed in {elapsed:.2f} seconds."
TABLE_WRITTEN = "Table saved to {path}"
FIGURE_WRITTEN = "Figure saved to {path}"
