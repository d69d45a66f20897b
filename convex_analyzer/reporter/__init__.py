"""Terminal and JSON renderings of diagnostics and a score."""