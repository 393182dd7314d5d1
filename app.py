# pip install gradio
import gradio as gr
from datetime import datetime
import logging

from proof_tree import FormationException
from proof_tree.config import ARGUMENT_DIR, LOG_FORMAT, LOG_LEVEL, SERVER_PORT
from proof_tree.interpreter import (
    ArgumentReadException, fol2sentence, list_arguments, load_argument, parse_formula,
)
from proof_tree.prover import prove
from proof_tree.tableau.generator import ConstantsExhaustedException

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


# ---------- Helper functions ----------
def timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def append_log(log_text: str, entry: str) -> str:
    line = f"[{timestamp()}] {entry}"
    return (log_text + "\n" + line).strip()


def load_argument_file(filename: str, log_text: str):
    """Fill the premise and conclusion boxes from a stored argument."""
    if not filename:
        return gr.update(), gr.update(), log_text, gr.update(value=log_text)
    try:
        stored = load_argument(ARGUMENT_DIR, filename)
    except (OSError, ArgumentReadException) as e:
        logging.error(f"app:load:error={e}")
        log_text = append_log(log_text, f'Could not load "{filename}": {e}')
        return gr.update(), gr.update(), log_text, gr.update(value=log_text)

    log_text = append_log(log_text, f'Argument loaded: "{filename}" {stored.description}'.strip())
    return (
        gr.update(value="\n".join(stored.premises)),
        gr.update(value=stored.conclusion),
        log_text,
        gr.update(value=log_text),
    )


# ---------- Proving ----------
def run_prover(premises_text: str, conclusion_text: str, infix: bool, log_text: str):
    lines = [line for line in (premises_text or "").splitlines() if line.strip() != ""]
    try:
        premises = [parse_formula(line) for line in lines]
        conclusion = parse_formula(conclusion_text or "")
    except FormationException as e:
        log_text = append_log(log_text, f"Poorly formed formula: {e.message}")
        return "", "", "", "", log_text, gr.update(value=log_text)

    formatter = (lambda formula: fol2sentence(formula, unicode=True)) if infix else str
    try:
        _, report = prove(premises, conclusion, formatter=formatter)
    except ConstantsExhaustedException as e:
        log_text = append_log(log_text, f"Gave up: {e.message}")
        return "", "", "", "", log_text, gr.update(value=log_text)

    log_text = append_log(
        log_text,
        f"{', '.join(report.premises)} ⊢ {report.conclusion} : {report.verdict()} (size={report.size})",
    )
    return (
        report.verdict(),
        str(report.size),
        f"{report.build_time:.6f} s",
        report.tree,
        log_text,
        gr.update(value=log_text),
    )


# ---------- Build UI ----------
with gr.Blocks(title="Proof Tree Generator", fill_height=True) as demo:
    log_state = gr.State("")
    gr.Markdown("## 🌳 Proof Tree Generator\n"
                "Premises are assumed true and the conclusion false; the argument is valid when every branch closes.\n"
                "_Symbols: `~` not, `&` and, `+` or, `>` if-then, `:` iff, `@x` for all x, `#x` some x "
                "(or ¬ ∧ ∨ → ↔ ∀ ∃)._")

    with gr.Row():
        # ---------- LEFT PANEL ----------
        with gr.Column(scale=5, min_width=420):
            with gr.Group():
                gr.Markdown("### 📚 Stored arguments")
                argument_select = gr.Dropdown(
                    label="Select an argument (.json)",
                    choices=list_arguments(ARGUMENT_DIR),
                    value=None,
                    interactive=True
                )
                with gr.Row():
                    refresh_btn = gr.Button("Refresh list")
                    load_btn = gr.Button("Load selected", variant="primary")

            with gr.Group():
                gr.Markdown("### ✍️ Argument")
                premises_box = gr.Textbox(label="Premises (one per line)", lines=8, placeholder="(P>Q)\nP")
                conclusion_box = gr.Textbox(label="Conclusion", placeholder="Q")
                infix_box = gr.Checkbox(label="Show tree in infix notation", value=False)
                prove_btn = gr.Button("Build proof tree", variant="primary")

            with gr.Group():
                gr.Markdown("### 🧭 Log")
                log_box = gr.Textbox(label="Log", value="", lines=8, interactive=False)

        # ---------- RIGHT PANEL ----------
        with gr.Column(scale=7, min_width=520):
            with gr.Row():
                verdict_box = gr.Textbox(label="Argument type", interactive=False)
                size_box = gr.Textbox(label="Tree size", interactive=False)
                time_box = gr.Textbox(label="Build time", interactive=False)
            tree_box = gr.Code(label="Proof tree", language=None, interactive=False)

    # ---- Bind events ----
    prove_btn.click(
        run_prover,
        inputs=[premises_box, conclusion_box, infix_box, log_state],
        outputs=[verdict_box, size_box, time_box, tree_box, log_state, log_box],
    )

    conclusion_box.submit(
        run_prover,
        inputs=[premises_box, conclusion_box, infix_box, log_state],
        outputs=[verdict_box, size_box, time_box, tree_box, log_state, log_box],
    )

    demo.load(
        fn=lambda: gr.update(choices=list_arguments(ARGUMENT_DIR), value=None),
        inputs=None,
        outputs=argument_select
    )

    refresh_btn.click(
        fn=lambda: gr.update(choices=list_arguments(ARGUMENT_DIR), value=None),
        inputs=None,
        outputs=argument_select
    )

    load_btn.click(
        load_argument_file,
        inputs=[argument_select, log_state],
        outputs=[premises_box, conclusion_box, log_state, log_box],
    )


def launch():
    demo.queue().launch(server_port=SERVER_PORT)


if __name__ == "__main__":
    launch()
