import tkinter as tk
from tkinter import scrolledtext, font, messagebox

from .Lexer import Lexer, LexicalError
from .analyzer import NO_ERRORS, perform_semantic_analysis_from_source


def run_lexical_analysis(source_code):
    """Token stream as text, one token per line."""
    try:
        tokens = Lexer(source_code).tokenize()
    except LexicalError as e:
        return f"Lexical error:\n{e}"
    return "\n".join(f"line {token.line:<4} {token}" for token in tokens)


def run_semantic_analysis_in_gui(source_code, show_listing=False):
    """Return (symbol table text, report text, status line) for the window."""
    if not source_code.strip():
        return "", "Please enter source code.", "No source"

    symbol_table_str, error_str, listing = perform_semantic_analysis_from_source(source_code)
    failed = error_str != NO_ERRORS
    report = error_str
    if show_listing:
        report += "\n\n--- Listing ---\n" + "\n".join(listing)
    status = "Analysis failed" if failed else "Analysis succeeded"
    return ("" if failed else symbol_table_str), report, status


class CompilerGUI:
    '''
    Source on the left; on the right the global symbol table above the
    diagnostics (or the token stream), with the controls underneath.
    '''

    def __init__(self, master_window):
        self.master = master_window
        master_window.title("Procedure Analyzer")
        text_font = font.Font(family="Consolas", size=11)

        self.show_listing = tk.BooleanVar(value=False)
        self.status = tk.StringVar(value="Ready")

        controls = tk.Frame(master_window)
        controls.pack(fill=tk.X, side=tk.BOTTOM, padx=10, pady=5)
        tk.Button(controls, text="Tokens", width=10, command=self.trigger_lexical_analysis).pack(side=tk.LEFT)
        tk.Button(controls, text="Analyze", width=10, command=self.trigger_semantic_analysis).pack(side=tk.LEFT, padx=5)
        tk.Checkbutton(controls, text="Show listing", variable=self.show_listing).pack(side=tk.LEFT, padx=10)
        tk.Label(controls, textvariable=self.status, anchor="e").pack(side=tk.RIGHT)

        self.source_input_text = scrolledtext.ScrolledText(master_window, undo=True, font=text_font, width=60)
        self.source_input_text.pack(fill=tk.BOTH, expand=True, side=tk.LEFT, padx=(10, 5), pady=10)

        results = tk.Frame(master_window)
        results.pack(fill=tk.BOTH, expand=True, side=tk.RIGHT, padx=(5, 10), pady=10)
        self.symbol_table_text = self._output_pane(results, "Symbol table", text_font, height=8)
        self.report_text = self._output_pane(results, "Diagnostics", text_font, height=16)

    @staticmethod
    def _output_pane(parent, title, text_font, height):
        tk.Label(parent, text=title, anchor="w").pack(fill=tk.X)
        pane = scrolledtext.ScrolledText(parent, state=tk.DISABLED, wrap=tk.NONE, font=text_font,
                                         height=height, width=80)
        pane.pack(fill=tk.BOTH, expand=True, pady=(0, 5))
        return pane

    @staticmethod
    def _set_text(pane, content_string):
        pane.config(state=tk.NORMAL)
        pane.delete(1.0, tk.END)
        pane.insert(tk.END, content_string)
        pane.config(state=tk.DISABLED)

    def _get_source_code_from_input(self):
        source = self.source_input_text.get(1.0, tk.END).strip()
        if not source:
            messagebox.showwarning("Empty input", "Enter a procedure before running the analysis.")
            return None
        return source

    def trigger_lexical_analysis(self):
        source_code = self._get_source_code_from_input()
        if source_code is not None:
            self._set_text(self.symbol_table_text, "")
            self._set_text(self.report_text, run_lexical_analysis(source_code))
            self.status.set("Token stream")

    def trigger_semantic_analysis(self):
        source_code = self._get_source_code_from_input()
        if source_code is not None:
            table, report, status = run_semantic_analysis_in_gui(source_code, self.show_listing.get())
            self._set_text(self.symbol_table_text, table)
            self._set_text(self.report_text, report)
            self.status.set(status)


def main():
    main_window = tk.Tk()
    CompilerGUI(main_window)
    main_window.mainloop()


if __name__ == "__main__":
    main()
