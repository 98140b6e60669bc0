def get_interface() -> str:
    """Static page that turns a download link into a proxied link."""
    return """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Download Link Stabilizer</title>
  <style>
    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
      max-width: 760px;
      margin: 0 auto;
      padding: 24px;
      background: #1f2430;
      color: #e6e6e6;
    }
    h1 { margin-bottom: 4px; }
    p.subtitle { margin-top: 0; color: #a0a4ad; }
    input[type=url] {
      width: 100%;
      box-sizing: border-box;
      padding: 12px;
      border-radius: 8px;
      border: 1px solid #3a4050;
      background: #272c38;
      color: inherit;
    }
    button {
      margin-top: 12px;
      margin-right: 8px;
      padding: 10px 18px;
      border: 0;
      border-radius: 8px;
      background: #5865f2;
      color: white;
      cursor: pointer;
    }
    #result { margin-top: 20px; display: none; }
    #result code {
      display: block;
      padding: 12px;
      border-radius: 8px;
      background: #272c38;
      word-break: break-all;
    }
  </style>
</head>
<body>
  <h1>Download Link Stabilizer</h1>
  <p class="subtitle">Relay a download through a retrying, range-aware proxy.</p>
  <form id="form">
    <input type="url" id="url" placeholder="https://example.com/file.zip" required>
    <button type="submit">Generate link</button>
  </form>
  <div id="result">
    <code id="link"></code>
    <button type="button" id="copy">Copy</button>
    <button type="button" id="open">Download</button>
  </div>
  <script>
    const form = document.getElementById('form');
    const link = document.getElementById('link');
    form.addEventListener('submit', event => {
      event.preventDefault();
      const target = document.getElementById('url').value.trim();
      if (!/^https?:\\/\\//.test(target)) {
        alert('URL must start with http:// or https://');
        return;
      }
      link.textContent = window.location.origin + '/' + encodeURIComponent(target);
      document.getElementById('result').style.display = 'block';
    });
    document.getElementById('copy').addEventListener('click', () => {
      navigator.clipboard.writeText(link.textContent);
    });
    document.getElementById('open').addEventListener('click', () => {
      window.location.href = link.textContent;
    });
  </script>
</body>
</html>
"""
