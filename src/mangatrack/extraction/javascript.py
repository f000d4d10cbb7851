"""Render scraping programs as browser scripts.

The runtime below mirrors ``engine.run_program`` and is the same for every
site; only the JSON program embedded into it differs.
"""

from __future__ import annotations

import json

from mangatrack.extraction.strategies import ScrapingProgram

MESSAGE_CHANNEL = "window.ReactNativeWebView"

_RUNTIME = r"""
(function(program) {
  function norm(text) { return String(text || '').replace(/\s+/g, ' ').trim(); }
  function fold(text) { return norm(text).toLowerCase(); }
  function escapeRe(text) { return text.replace(/[.*+?^${}()|[\]\\]/g, '\\$&'); }
  function stripSuffixes(text, suffixes) {
    (suffixes || []).forEach(function(suffix) {
      text = text.replace(new RegExp(escapeRe(suffix), 'gi'), '');
    });
    return norm(text);
  }
  function hasToken(value, tokens) {
    var lowered = String(value || '').toLowerCase();
    return (tokens || []).some(function(token) { return lowered.indexOf(token.toLowerCase()) !== -1; });
  }
  function all(selector) {
    try { return Array.prototype.slice.call(document.querySelectorAll(selector)); }
    catch (e) { return []; }
  }
  function meta(name) {
    var el = document.querySelector('meta[property="' + name + '"]') ||
             document.querySelector('meta[name="' + name + '"]');
    return el ? norm(el.content) : '';
  }
  function candidates(strategy, chain, extracted) {
    var out = [];
    var excluded;
    switch (strategy.type) {
      case 'select_text':
        excluded = (strategy.exclude_texts || []).map(fold);
        all(strategy.selector).forEach(function(el) {
          var text = norm(el.textContent);
          if (text.length >= strategy.min_length && excluded.indexOf(fold(text)) === -1) out.push(text);
        });
        break;
      case 'labeled_text':
        var caption = fold(strategy.caption);
        all(strategy.selector).forEach(function(el) {
          var text = norm(el.textContent);
          if (fold(text).indexOf(caption) === -1 || text.indexOf(strategy.separator) === -1) return;
          var value = text.split(strategy.separator).slice(1).join(strategy.separator).trim();
          if (value) out.push(value);
        });
        break;
      case 'longest_text':
        excluded = (strategy.exclude_texts || []).map(fold);
        var longest = '';
        all(strategy.selector).forEach(function(el) {
          var text = norm(el.textContent);
          if (excluded.indexOf(fold(text)) === -1 && text.length > longest.length) longest = text;
        });
        if (longest) out.push(longest);
        break;
      case 'meta':
        strategy.names.forEach(function(name) {
          var content = stripSuffixes(meta(name), strategy.strip_suffixes);
          if (content) out.push(content);
        });
        break;
      case 'document_title':
        var title = stripSuffixes(document.title || '', strategy.strip_suffixes);
        strategy.separators.forEach(function(separator) { title = title.split(separator)[0]; });
        title = title.trim();
        if (title) out.push(title);
        break;
      case 'select_image':
        all(strategy.selector).forEach(function(el) {
          if (!hasToken(el.alt, chain.excludeTokens) && el.src) out.push(el.src);
        });
        break;
      case 'image_by_alt':
        var wanted = fold(extracted.title);
        all('img').forEach(function(el) {
          var alt = fold(el.alt);
          if (!alt || hasToken(alt, chain.excludeTokens)) return;
          var named = strategy.keywords.some(function(keyword) { return alt.indexOf(keyword) !== -1; });
          if (named || (strategy.match_title && wanted && alt.indexOf(wanted) !== -1)) out.push(el.src);
        });
        break;
      case 'large_image':
        all('img').forEach(function(el) {
          if (el.width > strategy.min_width && el.height > strategy.min_height) out.push(el.src);
        });
        break;
      case 'select_text_list':
        out.push(all(strategy.selector).map(function(el) { return norm(el.textContent); }));
        break;
      case 'page_url':
        out.push(window.location.href);
        break;
    }
    return out;
  }
  function matchStatus(text) {
    var lowered = fold(text);
    for (var i = 0; i < program.statusKeywords.length; i++) {
      var entry = program.statusKeywords[i];
      if (entry[1].some(function(keyword) { return lowered.indexOf(keyword) !== -1; })) return entry[0];
    }
    return null;
  }
  function normalizeUrl(url, suffix) {
    var clean = url.split('#')[0].split('?')[0];
    if (suffix && clean.slice(-suffix.length) !== suffix) {
      clean = clean.split(suffix)[0].replace(/\/+$/, '') + suffix;
    }
    return clean;
  }
  function accept(chain, value) {
    switch (chain.kind) {
      case 'text':
        var text = norm(value);
        (chain.removeWords || []).forEach(function(word) {
          text = text.replace(new RegExp(escapeRe(word), 'gi'), '');
        });
        text = norm(text).replace(/,+$/, '').trim();
        if (chain.maxLength) text = text.substring(0, chain.maxLength);
        return text || null;
      case 'image':
        var url = norm(value);
        return url && !hasToken(url, chain.excludeTokens) ? url : null;
      case 'list':
        var seen = {};
        var items = [];
        (value || []).forEach(function(raw) {
          var item = norm(raw).replace(/[\s,;:|\/.]+$/, '');
          var key = item.toLowerCase();
          if (item && !seen[key]) { seen[key] = true; items.push(item); }
        });
        if (chain.limit) items = items.slice(0, chain.limit);
        return items.length ? items : null;
      case 'status':
        return matchStatus(value);
      case 'url':
        return value ? normalizeUrl(String(value), chain.canonicalSuffix) : null;
    }
    return null;
  }
  function resolve(chain, extracted) {
    for (var i = 0; i < chain.strategies.length; i++) {
      var found;
      try { found = candidates(chain.strategies[i], chain, extracted); }
      catch (e) { found = []; }
      for (var j = 0; j < found.length; j++) {
        var accepted = accept(chain, found[j]);
        if (accepted !== null && accepted !== undefined) return accepted;
      }
    }
    return chain['default'];
  }
  function probe() {
    var report = { url: window.location.href, fields: {} };
    program.fields.forEach(function(chain) {
      var attempts = {};
      chain.strategies.forEach(function(strategy) {
        var found;
        try { found = candidates(strategy, chain, {}); } catch (e) { found = []; }
        if (found.length) attempts[strategy.selector || strategy.type] = found.slice(0, 5);
      });
      report.fields[chain.name] = attempts;
    });
    report.meta = {
      ogTitle: meta('og:title'),
      ogDescription: meta('og:description'),
      ogImage: meta('og:image'),
      description: meta('description')
    };
    report.images = all('img').slice(0, 10).map(function(el, index) {
      return { index: index, src: el.src, alt: el.alt || '', width: el.width, height: el.height, classes: el.className };
    });
    report._isDebugAdapter = true;
    return report;
  }
  try {
    if (program.debug) return JSON.stringify(probe());
    var data = {};
    program.fields.forEach(function(chain) {
      var value = resolve(chain, data);
      if (value !== null && value !== undefined) data[chain.name] = value;
    });
    data.sourceWebsite = program.site;
    return JSON.stringify(data);
  } catch (e) {
    var failure = { error: e && e.message ? e.message : String(e) };
    if (program.debug) failure._isDebugAdapter = true;
    return JSON.stringify(failure);
  }
})
"""

_ENVELOPE = """(function() {{
  try {{
    var result = {script};
    if ({channel}) {{
      {channel}.postMessage(result);
    }}
    return result;
  }} catch (e) {{
    var failure = JSON.stringify({{ error: e && e.message ? e.message : String(e) }});
    if ({channel}) {{
      {channel}.postMessage(failure);
    }}
    return failure;
  }}
}})();
true;
"""


def render_program(program: ScrapingProgram) -> str:
    """Return a self-contained expression evaluating to the JSON result string."""

    data = json.dumps(program.to_dict(), ensure_ascii=True)
    return f"{_RUNTIME.strip()}({data})"


def wrap_for_messaging(script: str, *, channel: str = MESSAGE_CHANNEL) -> str:
    """Wrap a raw script so its result is posted back across the page boundary."""

    return _ENVELOPE.format(script=script, channel=channel)
