"""Stylesheets shared by every page the enhancement passes touch."""

from __future__ import annotations

from .pipeline import SharedStylesheet

RESPONSIVE_CSS = """/* Responsive enhancements generated by siteprep. */

.touch-target {
  min-height: 44px;
  min-width: 44px;
  display: inline-flex;
  align-items: center;
  justify-content: center;
}

input.touch-target,
select.touch-target,
textarea.touch-target {
  display: block;
  font-size: 16px;
}

.img-fluid {
  max-width: 100%;
  height: auto;
}

.table-responsive {
  display: block;
  width: 100%;
  overflow-x: auto;
  -webkit-overflow-scrolling: touch;
}

@media (max-width: 767.98px) {
  .touch-target {
    padding: 12px 16px;
  }

  h1 {
    font-size: 1.75rem;
  }
}
"""

ACCESSIBILITY_CSS = """/* Accessibility enhancements generated by siteprep. */

.skip-navigation {
  position: absolute;
  top: 0;
  left: 0;
  z-index: 10000;
}

.skip-link {
  position: absolute;
  top: -40px;
  left: 6px;
  padding: 8px 12px;
  background: #000;
  color: #fff;
  text-decoration: none;
}

.skip-link:focus {
  top: 6px;
}

.sr-only {
  position: absolute;
  width: 1px;
  height: 1px;
  padding: 0;
  margin: -1px;
  overflow: hidden;
  clip: rect(0, 0, 0, 0);
  white-space: nowrap;
  border: 0;
}

a:focus,
button:focus,
input:focus,
select:focus,
textarea:focus {
  outline: 3px solid #4a90e2;
  outline-offset: 2px;
}

@media (prefers-reduced-motion: reduce) {
  *,
  *::before,
  *::after {
    animation-duration: 0.01ms !important;
    transition-duration: 0.01ms !important;
    scroll-behavior: auto !important;
  }
}
"""

RESPONSIVE_STYLESHEET = SharedStylesheet(
    path="assets/css/responsive-enhancements.css", content=RESPONSIVE_CSS
)
ACCESSIBILITY_STYLESHEET = SharedStylesheet(
    path="assets/css/accessibility.css", content=ACCESSIBILITY_CSS
)


__all__ = [
    "ACCESSIBILITY_CSS",
    "ACCESSIBILITY_STYLESHEET",
    "RESPONSIVE_CSS",
    "RESPONSIVE_STYLESHEET",
]
