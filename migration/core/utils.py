def format_info(depth, score, nodes, elapsed, move, win_score):
    """One-line search summary; `elapsed` is in seconds."""
    nps = int(nodes / elapsed) if elapsed > 0 else 0
    move_str = str(move) if move else "-"

    if abs(score) >= win_score:
        score_str = "win" if score > 0 else "loss"
    else:
        score_str = f"cp {score}"

    return (
        f"info depth {depth} score {score_str} nodes {nodes} nps {nps} "
        f"time {int(elapsed * 1000)} move {move_str}"
    )
