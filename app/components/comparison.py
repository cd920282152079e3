# app/components/comparison.py
import streamlit.components.v1 as components

MIN_POSITION = 0.0
MAX_POSITION = 100.0
INITIAL_POSITION = 50.0
FADE_SECONDS = 3


def clamp_percent(value) -> float:
    return max(MIN_POSITION, min(float(value), MAX_POSITION))


# clampPosition maps a pointer x to a percent of the container, held inside its bounds
_SLIDER_TEMPLATE = """
<style>
  .aura-cmp {{ position: relative; width: 100%; max-width: 448px; aspect-ratio: 3 / 4; margin: 0 auto;
    overflow: hidden; border-radius: 12px; user-select: none; cursor: col-resize; background: #f5f5f4; }}
  .aura-cmp img {{ position: absolute; top: 0; left: 0; height: 100%; object-fit: cover; pointer-events: none; }}
  .aura-cmp .after {{ width: 100%; }}
  .aura-cmp .clip {{ position: absolute; top: 0; left: 0; height: 100%; overflow: hidden; width: {position}%; }}
  .aura-cmp .handle {{ position: absolute; top: 0; bottom: 0; width: 4px; background: #fff; left: {position}%;
    transform: translateX(-2px); box-shadow: 0 0 8px rgba(0,0,0,.3); z-index: 2; }}
  .aura-cmp .knob {{ position: absolute; top: 50%; left: 50%; width: 32px; height: 32px; border-radius: 50%;
    background: #fff; transform: translate(-50%, -50%); box-shadow: 0 2px 6px rgba(0,0,0,.3); }}
  .aura-cmp .tag {{ position: absolute; top: 16px; font: 12px sans-serif; color: #fff; padding: 2px 8px;
    border-radius: 4px; z-index: 3; }}
  .aura-cmp .tag.before {{ left: 16px; background: rgba(0,0,0,.6); }}
  .aura-cmp .tag.after {{ right: 16px; background: rgba(244,63,94,.8); }}
</style>
<div class="aura-cmp" id="aura-cmp">
  <img class="after" src="{after}" alt="After" draggable="false">
  <div class="clip" id="aura-clip"><img id="aura-before" src="{before}" alt="Before" draggable="false"></div>
  <div class="handle" id="aura-handle"><div class="knob"></div></div>
  <div class="tag before">{before_label}</div>
  <div class="tag after">{after_label}</div>
</div>
<script>
  const box = document.getElementById("aura-cmp");
  const clip = document.getElementById("aura-clip");
  const handle = document.getElementById("aura-handle");
  const before = document.getElementById("aura-before");
  let dragging = false;

  function fit() {{ before.style.width = box.offsetWidth + "px"; }}

  function clampPosition(clientX) {{
    const rect = box.getBoundingClientRect();
    if (rect.width <= 0) return {initial};
    const x = Math.max(0, Math.min(clientX - rect.left, rect.width));
    return Math.max({min_pos}, Math.min((x / rect.width) * 100, {max_pos}));
  }}

  function move(clientX) {{
    if (!dragging) return;
    const pct = clampPosition(clientX);
    clip.style.width = pct + "%";
    handle.style.left = pct + "%";
  }}

  box.addEventListener("mousedown", () => {{ dragging = true; }});
  box.addEventListener("touchstart", () => {{ dragging = true; }});
  window.addEventListener("mouseup", () => {{ dragging = false; }});
  window.addEventListener("touchend", () => {{ dragging = false; }});
  window.addEventListener("mousemove", (e) => move(e.clientX));
  window.addEventListener("touchmove", (e) => move(e.touches[0].clientX));
  window.addEventListener("resize", fit);
  fit();
</script>
"""

_MORPH_TEMPLATE = """
<style>
  .aura-morph {{ position: relative; width: 100%; max-width: 448px; aspect-ratio: 3 / 4; margin: 0 auto;
    overflow: hidden; border-radius: 12px; background: #f5f5f4; }}
  .aura-morph img {{ position: absolute; inset: 0; width: 100%; height: 100%; object-fit: cover; }}
  .aura-morph .ideal {{ opacity: .5; animation: auraPulseOpacity {seconds}s ease-in-out infinite; }}
  .aura-morph .tag {{ position: absolute; bottom: 16px; left: 0; right: 0; text-align: center; }}
  .aura-morph .tag span {{ background: rgba(0,0,0,.5); color: #fff; font: 12px sans-serif; padding: 4px 12px;
    border-radius: 999px; }}
  @keyframes auraPulseOpacity {{ 0% {{ opacity: 0; }} 50% {{ opacity: 1; }} 100% {{ opacity: 0; }} }}
</style>
<div class="aura-morph">
  <img src="{before}" alt="Original">
  <img class="ideal" src="{after}" alt="Generated">
  <div class="tag"><span>Morphing View</span></div>
</div>
"""


def slider_html(before_url: str, after_url: str, after_label: str = "Enhanced",
                before_label: str = "Original", position: float = INITIAL_POSITION) -> str:
    position = clamp_percent(position)
    return _SLIDER_TEMPLATE.format(
        before=before_url,
        after=after_url,
        before_label=before_label,
        after_label=after_label,
        position=position,
        initial=INITIAL_POSITION,
        min_pos=MIN_POSITION,
        max_pos=MAX_POSITION,
    )


def morph_html(before_url: str, after_url: str, seconds: int = FADE_SECONDS) -> str:
    return _MORPH_TEMPLATE.format(before=before_url, after=after_url, seconds=seconds)


def render_comparison(before_url: str, after_url: str, view: str = "slider",
                      after_label: str = "Enhanced", height: int = 620):
    if view == "morph":
        html = morph_html(before_url, after_url)
    else:
        html = slider_html(before_url, after_url, after_label=after_label)
    components.html(html, height=height)
